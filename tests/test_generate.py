from types import SimpleNamespace

from api_autodoc.models import EndpointDetails, Examples, Parameter
from api_autodoc.openapi.generate import aggregate_documents, derive_tag, generate_openapi_doc


def _details(**overrides) -> dict:
    details = {
        "description": "List project users",
        "parameters": [
            {"in": "query", "name": "limit", "schema": {"type": ["integer", "null"]}},
        ],
        "request_schema": {"type": "object", "properties": {"name": {"type": "string"}}},
        "response_schema": {"type": "object", "properties": {"data": {"type": "array"}}},
        "examples": {"request": {"name": "Ada"}, "response": {"data": []}},
    }
    details.update(overrides)
    return details


def _record(path: str, method: str, document: dict) -> SimpleNamespace:
    return SimpleNamespace(path=path, method=method, document=document)


class TestDeriveTag:
    def test_hyphenated_segment(self):
        assert derive_tag("/api/v1/project-users") == "Project Users"

    def test_simple_segment(self):
        assert derive_tag("/users") == "Users"

    def test_trailing_slash_falls_back_to_path(self):
        assert derive_tag("/users/") == "/Users/"

    def test_root_path(self):
        assert derive_tag("/") == "/"

    def test_already_capitalized(self):
        assert derive_tag("/api/Order-items") == "Order Items"


class TestGenerateOpenApiDoc:
    def test_structure(self):
        doc = generate_openapi_doc("/api/v1/project-users", "get", _details())
        assert doc["openapi"] == "3.0.3"
        operation = doc["paths"]["/api/v1/project-users"]["get"]
        assert operation["tags"] == ["Project Users"]
        assert operation["description"] == "List project users"
        response = operation["responses"]["200"]
        assert response["description"] == "Successful response"
        assert response["content"]["application/json"]["example"] == {"data": []}

    def test_default_info(self):
        doc = generate_openapi_doc("/users", "get", _details())
        assert doc["info"] == {"title": "API Documentation", "version": "1.0.0"}

    def test_custom_info(self):
        doc = generate_openapi_doc("/users", "get", _details(), info={"title": "Shop", "version": "2.1.0"})
        assert doc["info"] == {"title": "Shop", "version": "2.1.0"}

    def test_method_is_lowercased(self):
        doc = generate_openapi_doc("/users", "GET", _details())
        assert list(doc["paths"]["/users"]) == ["get"]

    def test_parameter_schemas_normalized(self):
        doc = generate_openapi_doc("/users", "get", _details())
        param = doc["paths"]["/users"]["get"]["parameters"][0]
        assert param == {"in": "query", "name": "limit", "schema": {"type": "integer", "nullable": True}}

    def test_response_schema_normalized(self):
        details = _details(response_schema={"type": "object", "properties": {"next": {"type": "null"}}})
        doc = generate_openapi_doc("/users", "get", details)
        schema = doc["paths"]["/users"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["properties"]["next"] == {"type": "string", "nullable": True}

    def test_get_never_has_request_body(self):
        doc = generate_openapi_doc("/users", "get", _details())
        assert "requestBody" not in doc["paths"]["/users"]["get"]

    def test_delete_never_has_request_body(self):
        doc = generate_openapi_doc("/users/1", "delete", _details())
        assert "requestBody" not in doc["paths"]["/users/1"]["delete"]

    def test_post_with_request_schema(self):
        doc = generate_openapi_doc("/users", "post", _details())
        body = doc["paths"]["/users"]["post"]["requestBody"]
        assert body["content"]["application/json"]["example"] == {"name": "Ada"}
        assert body["content"]["application/json"]["schema"]["properties"]["name"] == {"type": "string"}
        assert "required" not in body

    def test_post_without_request_schema(self):
        doc = generate_openapi_doc("/users", "post", _details(request_schema=None))
        assert "requestBody" not in doc["paths"]["/users"]["post"]

    def test_empty_request_schema_still_has_request_body(self):
        for method in ("post", "put", "patch"):
            doc = generate_openapi_doc("/users", method, _details(request_schema={}))
            body = doc["paths"]["/users"][method]["requestBody"]
            assert body["content"]["application/json"]["schema"] == {}

    def test_get_with_empty_request_schema(self):
        doc = generate_openapi_doc("/users", "get", _details(request_schema={}))
        assert "requestBody" not in doc["paths"]["/users"]["get"]

    def test_parameter_without_schema_gets_schema_key(self):
        details = _details(parameters=[{"in": "path", "name": "id"}])
        doc = generate_openapi_doc("/users/{id}", "get", details)
        assert doc["paths"]["/users/{id}"]["get"]["parameters"] == [{"in": "path", "name": "id", "schema": None}]

    def test_put_and_patch_have_request_body(self):
        for method in ("put", "patch"):
            doc = generate_openapi_doc("/users/1", method, _details())
            assert "requestBody" in doc["paths"]["/users/1"][method]

    def test_request_schema_normalized(self):
        details = _details(request_schema={"type": ["object", "null"]})
        doc = generate_openapi_doc("/users", "post", details)
        schema = doc["paths"]["/users"]["post"]["requestBody"]["content"]["application/json"]["schema"]
        assert schema == {"type": "object", "nullable": True}

    def test_missing_fields_do_not_raise(self):
        doc = generate_openapi_doc("/users", "post", {})
        operation = doc["paths"]["/users"]["post"]
        assert operation["description"] is None
        assert operation["parameters"] == []
        assert operation["responses"]["200"]["content"]["application/json"] == {"schema": None, "example": None}
        assert "requestBody" not in operation

    def test_accepts_endpoint_details_model(self):
        details = EndpointDetails(
            description="Create user",
            parameters=[Parameter(location="header", name="X-Trace", schema={"type": "string"})],
            request_schema={"type": "object"},
            response_schema={"type": "object"},
            examples=Examples(request={"a": 1}, response={"id": 1}),
        )
        doc = generate_openapi_doc("/users", "post", details)
        operation = doc["paths"]["/users"]["post"]
        assert operation["parameters"] == [{"in": "header", "name": "X-Trace", "schema": {"type": "string"}}]
        assert operation["requestBody"]["content"]["application/json"]["example"] == {"a": 1}


class TestAggregateDocuments:
    def test_empty(self):
        doc = aggregate_documents([])
        assert doc == {
            "openapi": "3.0.3",
            "info": {"title": "My API", "version": "1.0.0"},
            "paths": {},
            "components": {},
            "tags": [],
        }

    def test_methods_on_same_path_are_merged(self):
        records = [
            _record("/users", "POST", _details(description="Create user")),
            _record("/users", "GET", _details(description="List users")),
        ]
        doc = aggregate_documents(records)
        assert set(doc["paths"]["/users"]) == {"get", "post"}
        assert doc["paths"]["/users"]["get"]["description"] == "List users"
        assert doc["paths"]["/users"]["post"]["description"] == "Create user"
        assert "requestBody" in doc["paths"]["/users"]["post"]
        assert "requestBody" not in doc["paths"]["/users"]["get"]

    def test_later_record_wins_for_same_key(self):
        records = [
            _record("/users", "GET", _details(description="first")),
            _record("/users", "GET", _details(description="second")),
        ]
        doc = aggregate_documents(records)
        assert doc["paths"]["/users"]["get"]["description"] == "second"

    def test_distinct_paths(self):
        records = [
            _record("/users", "GET", _details()),
            _record("/orders", "GET", _details()),
        ]
        doc = aggregate_documents(records)
        assert list(doc["paths"]) == ["/users", "/orders"]

    def test_custom_info(self):
        doc = aggregate_documents([], info={"title": "Shop", "version": "3.0.0"})
        assert doc["info"] == {"title": "Shop", "version": "3.0.0"}

    def test_operation_shaped_document_is_migrated(self):
        operation = {
            "summary": "Get user",
            "responses": {
                "200": {
                    "description": "OK",
                    "content": {"application/json": {"schema": {"type": "null"}, "example": None}},
                }
            },
        }
        doc = aggregate_documents([_record("/users/{id}", "GET", operation)])
        op = doc["paths"]["/users/{id}"]["get"]
        assert op["description"] == "Get user"
        assert op["responses"]["200"]["content"]["application/json"]["schema"] == {
            "type": "string",
            "nullable": True,
        }

    def test_unreadable_documents_are_skipped(self):
        records = [
            _record("/broken", "GET", None),
            _record("/bad-op", "GET", {"responses": {"200": {"content": {}}}}),
            _record("/users", "GET", _details()),
        ]
        doc = aggregate_documents(records)
        assert list(doc["paths"]) == ["/users"]
