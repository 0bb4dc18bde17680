"""Validates generated OpenAPI documents for structural correctness."""

from typing import Any

from api_autodoc.openapi.schema import UNION_KEYWORDS

METHODS = ("get", "post", "put", "patch", "delete")


def validate_paths(doc: dict) -> dict[str, str]:
    """Check path keys, method keys and responses.

    Returns dict of {location: error_message} for every problem found.
    """
    errors = {}
    for path, methods in (doc.get("paths") or {}).items():
        if not path.startswith("/"):
            errors[path] = "Path must start with '/'"
        if not isinstance(methods, dict):
            errors[path] = "Path item must be a mapping"
            continue
        for method, operation in methods.items():
            location = f"{path} {method}"
            if method not in METHODS:
                errors[location] = f"Unsupported method: {method}"
                continue
            if not (operation or {}).get("responses"):
                errors[location] = "Operation has no responses"
    return errors


def _walk(schema: Any, location: str, errors: dict[str, str]) -> None:
    if not isinstance(schema, dict):
        return
    schema_type = schema.get("type")
    if schema_type == "null" or (isinstance(schema_type, list) and "null" in schema_type):
        errors[location] = f"Schema type {schema_type!r} is not valid in OpenAPI 3.0"
    for name, prop in (schema.get("properties") or {}).items():
        _walk(prop, f"{location}.properties.{name}", errors)
    _walk(schema.get("items"), f"{location}.items", errors)
    for key in UNION_KEYWORDS:
        for i, member in enumerate(schema.get(key) or []):
            _walk(member, f"{location}.{key}[{i}]", errors)


def _content_schemas(content: dict | None, prefix: str):
    for media_type, media in (content or {}).items():
        yield f"{prefix}.content.{media_type}", (media or {}).get("schema")


def validate_schemas(doc: dict) -> dict[str, str]:
    """Check that no schema still uses a ``null`` type.

    Returns dict of {location: error_message}.
    """
    errors: dict[str, str] = {}
    for path, methods in (doc.get("paths") or {}).items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            operation = operation or {}
            base = f"{path} {method}"
            for i, param in enumerate(operation.get("parameters") or []):
                _walk(param.get("schema"), f"{base} parameters[{i}]", errors)
            body = operation.get("requestBody") or {}
            for location, schema in _content_schemas(body.get("content"), f"{base} requestBody"):
                _walk(schema, location, errors)
            for status, response in (operation.get("responses") or {}).items():
                content = (response or {}).get("content")
                for location, schema in _content_schemas(content, f"{base} responses.{status}"):
                    _walk(schema, location, errors)
    return errors


def validate_document(doc: dict) -> dict[str, str]:
    """Run all validations on an OpenAPI document.

    Returns dict of {location: error_message} for all problems found.
    """
    errors = {}
    for key in ("openapi", "info"):
        if key not in doc:
            errors[key] = f"Missing top-level field: {key}"
    errors.update(validate_paths(doc))
    errors.update(validate_schemas(doc))
    return errors
