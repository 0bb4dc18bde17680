"""OpenAPI document generation.

Turns stored endpoint details into single-path OpenAPI 3.0 documents and
folds many of them into the aggregate document shown in Swagger UI.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from api_autodoc.models import EndpointDetails
from api_autodoc.openapi.operation import details_from_operation
from api_autodoc.openapi.schema import normalize_schema

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"
DEFAULT_TITLE = "API Documentation"
DEFAULT_VERSION = "1.0.0"
BODY_METHODS = ("post", "put", "patch")

_WORD_START = re.compile(r"\b\w", re.ASCII)


def derive_tag(path: str) -> str:
    """Build a readable tag from the last path segment.

    ``/api/v1/project-users`` becomes ``Project Users``.
    """
    segment = path.split("/")[-1] or path
    return _WORD_START.sub(lambda m: m.group(0).upper(), segment.replace("-", " "))


def _media(schema: Any, example: Any) -> dict:
    return {"application/json": {"schema": schema, "example": example}}


def generate_openapi_doc(
    path: str,
    method: str,
    details: Mapping[str, Any] | BaseModel,
    info: Mapping[str, str] | None = None,
) -> dict:
    """Generate an OpenAPI document holding exactly one path and one method.

    ``requestBody`` is only emitted for post, put and patch, and only when a
    request schema is present, even an empty one. Missing fields in
    ``details`` come out as ``None`` rather than raising.
    """
    if isinstance(details, BaseModel):
        details = details.to_document() if isinstance(details, EndpointDetails) else details.model_dump()
    info = info or {}
    method = method.lower()
    examples = details.get("examples") or {}

    parameters = [
        {**param, "schema": normalize_schema(param.get("schema"))}
        for param in details.get("parameters") or []
    ]

    operation: dict[str, Any] = {
        "tags": [derive_tag(path)],
        "description": details.get("description"),
        "parameters": parameters,
        "responses": {
            "200": {
                "description": "Successful response",
                "content": _media(
                    normalize_schema(details.get("response_schema")),
                    examples.get("response"),
                ),
            }
        },
    }

    request_schema = details.get("request_schema")
    if request_schema is not None and method in BODY_METHODS:
        operation["requestBody"] = {
            "content": _media(normalize_schema(request_schema), examples.get("request")),
        }

    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": info.get("title") or DEFAULT_TITLE,
            "version": info.get("version") or DEFAULT_VERSION,
        },
        "paths": {path: {method: operation}},
    }


def _details_for(document: Any) -> Mapping[str, Any] | None:
    """Read a stored document as endpoint details, migrating Operation-shaped ones."""
    if not isinstance(document, Mapping):
        return None
    if "responses" in document:
        try:
            return details_from_operation(document)
        except ValidationError:
            return None
    return document


def aggregate_documents(records: Iterable[Any], info: Mapping[str, str] | None = None) -> dict:
    """Fold stored endpoint records into one OpenAPI document.

    ``records`` need ``path``, ``method`` and ``document`` attributes and are
    merged in the order given. Methods on the same path sit side by side; a
    repeated (path, method) pair is overwritten by the later record.
    """
    info = info or {}
    aggregate: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": info.get("title") or "My API",
            "version": info.get("version") or DEFAULT_VERSION,
        },
        "paths": {},
        "components": {},
        "tags": [],
    }

    for record in records:
        details = _details_for(record.document)
        if details is None:
            logger.warning("Skipping %s %s: unreadable stored document", record.method, record.path)
            continue
        doc = generate_openapi_doc(record.path, record.method, details)
        for path, methods in doc["paths"].items():
            aggregate["paths"].setdefault(path, {}).update(methods)

    return aggregate
