"""Data models shared by the proxy, the LLM agent and the store.

``EndpointDetails`` is the document persisted for every (path, method)
pair and later turned into an OpenAPI path item.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class Parameter(BaseModel):
    """A single request parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True)

    location: Literal["query", "path", "header", "cookie"] = Field(alias="in")
    name: str
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    description: str | None = None


class Examples(BaseModel):
    request: Any = None
    response: Any = None


class EndpointDetails(BaseModel):
    """Endpoint description produced by the model for one observed call."""

    description: str = ""
    parameters: list[Parameter] = []
    request_schema: dict[str, Any] | None = None
    response_schema: dict[str, Any] = {}
    examples: Examples = Field(default_factory=Examples)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible mapping stored for the endpoint."""
        document = self.model_dump(mode="json", by_alias=True, exclude={"parameters"})
        document["parameters"] = [
            p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in self.parameters
        ]
        return document


class DocumentationData(BaseModel):
    """One captured request/response pair."""

    method: HttpMethod
    path: str
    params: dict[str, str] = {}
    body: Any = None
    response: Any = None
    status: int
    headers: dict[str, str] = {}
