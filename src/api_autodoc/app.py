"""
FastAPI application factory.

Wires the endpoint store, the OpenAPI agent and the upstream HTTP client
into the autodoc routes and serves Swagger UI over the stored documents.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html

from api_autodoc import __version__
from api_autodoc.agent import OpenApiAgent
from api_autodoc.config import Settings
from api_autodoc.router import router
from api_autodoc.service import AutodocService, Summarizer
from api_autodoc.storage import EndpointStore


def create_app(
    settings: Settings | None = None,
    store: EndpointStore | None = None,
    summarizer: Summarizer | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the application; collaborators default to ones built from ``settings``."""
    settings = settings or Settings()
    store = store or EndpointStore(settings.database_url)
    summarizer = summarizer or OpenApiAgent(model=settings.model)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.create_all()
        async with httpx.AsyncClient(transport=transport, timeout=settings.upstream_timeout) as client:
            app.state.http = client
            yield
        await store.dispose()

    app = FastAPI(
        title="API Autodoc",
        description="Reverse proxy that documents the API traffic it forwards.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.service = AutodocService(store, summarizer, settings.doc_info)

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def swagger_ui():
        return get_swagger_ui_html(openapi_url="/api/spec", title=settings.doc_title)

    return app
