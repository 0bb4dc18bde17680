"""Autodoc API router."""

import logging
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api_autodoc.config import Settings
from api_autodoc.errors import ConfigurationError, error_message
from api_autodoc.proxy import build_target_url, forward_request
from api_autodoc.service import AutodocService
from api_autodoc.storage import EndpointStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
ENDPOINT_PREFIX = "endpoint="
MISSING_ENDPOINT = "Missing required query parameter: endpoint"


def get_service(request: Request) -> AutodocService:
    return request.app.state.service


def get_store(request: Request) -> EndpointStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def target_from_query(query: str) -> str | None:
    """Read the target URL from a raw ``endpoint=<url-encoded url>`` query string.

    Everything after ``endpoint=`` is the target, so an unencoded target
    keeps its own query string.
    """
    if not query.startswith(ENDPOINT_PREFIX):
        return None
    return unquote(query[len(ENDPOINT_PREFIX):]) or None


def _error_response(exc: Exception) -> JSONResponse:
    logger.error("Documentation request failed: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": error_message(exc), "error": str(exc)},
    )


async def _document(request: Request, target_url: str, service: AutodocService) -> JSONResponse:
    try:
        body = await request.body()
        observation = await forward_request(
            request.app.state.http, target_url, request.method, request.headers, body
        )
        record = await service.document(observation)
    except Exception as e:
        return _error_response(e)

    return JSONResponse({"status": "documented", "endpoint": record.path, "spec": record.document})


@router.api_route("/autodoc", methods=METHODS)
async def autodoc_by_query(request: Request, service: AutodocService = Depends(get_service)):
    """Document a call to the fully qualified URL given in ``endpoint``."""
    logger.info("Starting documentation process for %s request", request.method)
    target = target_from_query(request.url.query)
    if not target:
        return JSONResponse(status_code=400, content={"status": "error", "message": MISSING_ENDPOINT})
    return await _document(request, target, service)


@router.api_route("/autodoc/{path:path}", methods=METHODS)
async def autodoc_by_path(
    path: str,
    request: Request,
    service: AutodocService = Depends(get_service),
    settings: Settings = Depends(get_settings),
):
    """Document a call to the configured backend at the same path."""
    logger.info("Starting documentation process for %s request", request.method)
    if not settings.real_api_endpoint:
        return _error_response(ConfigurationError("REAL_API_ENDPOINT is not configured"))
    target = build_target_url(settings.real_api_endpoint, path, request.url.query)
    return await _document(request, target, service)


@router.get("/health")
async def health(store: EndpointStore = Depends(get_store)):
    try:
        return JSONResponse(await store.ping())
    except Exception as e:
        logger.exception("Health check failed")
        return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})


@router.get("/spec")
async def openapi_spec(service: AutodocService = Depends(get_service)):
    """Aggregate OpenAPI document for every documented endpoint."""
    return await service.aggregate()
