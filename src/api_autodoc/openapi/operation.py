"""OpenAPI Operation object model.

Documents stored by earlier versions of the service hold a full OpenAPI
Operation rather than ``EndpointDetails``. ``details_from_operation``
maps them onto the details shape so they render like every other record.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Encoding(BaseModel):
    contentType: str | None = None
    headers: dict[str, Any] | None = None
    style: str | None = None
    explode: bool | None = None
    allowReserved: bool | None = None


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, dict[str, Any]] | None = None
    encoding: dict[str, Encoding] | None = None


class OperationParameter(BaseModel):
    """A parameter object; ``schema`` and ``content`` are mutually exclusive."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: Literal["query", "header", "path", "cookie"] = Field(alias="in")
    description: str | None = None
    required: bool = False
    deprecated: bool | None = None
    allowEmptyValue: bool | None = None
    style: Literal[
        "matrix", "label", "form", "simple", "spaceDelimited", "pipeDelimited", "deepObject"
    ] | None = None
    explode: bool | None = None
    allowReserved: bool | None = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    example: Any = None
    examples: dict[str, dict[str, Any]] | None = None
    content: dict[str, MediaType] | None = None

    @model_validator(mode="after")
    def _schema_or_content(self) -> "OperationParameter":
        if self.schema_ is not None and self.content is not None:
            raise ValueError("Parameter cannot have both 'schema' and 'content'")
        return self


class RequestBody(BaseModel):
    description: str | None = None
    content: dict[str, MediaType]
    required: bool = False


class Response(BaseModel):
    description: str
    headers: dict[str, Any] | None = None
    content: dict[str, MediaType] | None = None
    links: dict[str, Any] | None = None


class Operation(BaseModel):
    """One HTTP method on one path, as OpenAPI 3.0 describes it."""

    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operationId: str | None = None
    parameters: list[OperationParameter] | None = None
    requestBody: RequestBody | None = None
    responses: dict[str, Response] = {}
    deprecated: bool | None = None
    security: list[dict[str, list[str]]] | None = None


def _pick_media(content: dict[str, MediaType] | None) -> MediaType | None:
    if not content:
        return None
    return content.get("application/json") or next(iter(content.values()))


def _pick_response(responses: dict[str, Response]) -> Response | None:
    if "200" in responses:
        return responses["200"]
    for status, response in responses.items():
        if status.startswith("2"):
            return response
    return next(iter(responses.values()), None)


def details_from_operation(operation: dict[str, Any]) -> dict[str, Any]:
    """Map an Operation-shaped document to the endpoint details shape.

    Raises ``pydantic.ValidationError`` when ``operation`` is not a valid
    Operation object.
    """
    op = Operation.model_validate(operation)

    parameters = []
    for param in op.parameters or []:
        item: dict[str, Any] = {"in": param.location, "name": param.name}
        schema = param.schema_
        if schema is None:
            media = _pick_media(param.content)
            schema = media.schema_ if media else None
        item["schema"] = schema or {}
        if param.description is not None:
            item["description"] = param.description
        parameters.append(item)

    response = _pick_response(op.responses)
    response_media = _pick_media(response.content) if response else None
    request_media = _pick_media(op.requestBody.content) if op.requestBody else None

    return {
        "description": op.description or op.summary or "",
        "parameters": parameters,
        "request_schema": request_media.schema_ if request_media else None,
        "response_schema": (response_media.schema_ if response_media else None) or {},
        "examples": {
            "request": request_media.example if request_media else None,
            "response": response_media.example if response_media else None,
        },
    }
