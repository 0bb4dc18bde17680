"""Schema normalization for OpenAPI 3.0.

Model output tends to use JSON Schema idioms that OpenAPI 3.0 tooling
rejects (``type: "null"``, type lists). ``normalize_schema`` rewrites a
fragment into the 3.0 dialect. Only one branch applies per fragment,
checked in this order: null type, type list, properties, items, unions.
"""

from typing import Any

UNION_KEYWORDS = ("anyOf", "oneOf", "allOf")


def normalize_schema(schema: Any) -> Any:
    """Return ``schema`` rewritten for OpenAPI 3.0.

    ``None`` and non-mapping values are returned as they are.
    """
    if not isinstance(schema, dict):
        return schema

    schema_type = schema.get("type")

    if schema_type == "null":
        return {**schema, "type": "string", "nullable": True}

    if isinstance(schema_type, list):
        types = [t for t in schema_type if t != "null"]
        has_null = "null" in schema_type

        if len(types) == 1:
            result = {**schema, "type": types[0]}
            if has_null:
                result["nullable"] = True
            else:
                result.pop("nullable", None)
            return result

        if not types and has_null:
            return {**schema, "type": "string", "nullable": True}

        # Several non-null types: keep them as a list, then fall through.
        if has_null:
            schema = {**schema, "type": types, "nullable": True}

    if isinstance(schema.get("properties"), dict):
        properties = {
            name: normalize_schema(prop) for name, prop in schema["properties"].items()
        }
        return {**schema, "properties": properties}

    if schema.get("items") is not None:
        return {**schema, "items": normalize_schema(schema["items"])}

    for key in UNION_KEYWORDS:
        if isinstance(schema.get(key), list):
            schema[key] = [normalize_schema(member) for member in schema[key]]

    return schema
