import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from schemadoc.generator.models import GeneratorOptions, RouteDefinition, RouteResponse
from schemadoc.generator.openapi import BUILTIN_SCHEMAS, SwaggerGenerator
from schemadoc.schema.nodes import array, number, obj, string

FIXTURES = Path(__file__).parent / "fixtures"

USER = obj({
    "name": string().describe("User name"),
    "age": number().describe("User age"),
}).describe("User")


def _options(**overrides) -> GeneratorOptions:
    data = {
        "title": "My API",
        "version": "1.0.0",
        "description": "API documentation for test",
        "base_path": "http://localhost:3000",
        "contact": {"name": "Developer", "email": "developer@example.com"},
    }
    data.update(overrides)
    return GeneratorOptions(**data)


class TestDocumentStructure:
    def test_basic_structure(self):
        spec = SwaggerGenerator(_options()).generate_spec()
        assert spec["openapi"] == "3.0.0"
        assert spec["info"] == {
            "title": "My API",
            "version": "1.0.0",
            "description": "API documentation for test",
            "contact": {"name": "Developer", "email": "developer@example.com"},
        }
        assert spec["servers"] == [{"url": "http://localhost:3000"}]
        assert spec["paths"] == {}

    def test_defaults_without_options(self):
        spec = SwaggerGenerator().generate_spec()
        assert spec["info"]["title"] == "API"
        assert "servers" not in spec
        assert spec["components"]["schemas"] == BUILTIN_SCHEMAS

    def test_external_docs_license_and_tags(self):
        options = _options(
            external_docs={"url": "https://example.com/docs"},
            license={"name": "MIT"},
            terms_of_service="https://example.com/tos",
            tags=[{"name": "users", "description": "User operations"}],
        )
        spec = SwaggerGenerator(options).generate_spec()
        assert spec["externalDocs"] == {"url": "https://example.com/docs"}
        assert spec["info"]["license"] == {"name": "MIT"}
        assert spec["info"]["termsOfService"] == "https://example.com/tos"
        assert spec["tags"] == [{"name": "users", "description": "User operations"}]

    def test_user_components_keep_builtins(self):
        options = _options(components={
            "schemas": {"Extra": {"type": "string"}},
            "securitySchemes": {"bearer": {"type": "http", "scheme": "bearer"}},
        })
        spec = SwaggerGenerator(options).generate_spec()
        schemas = spec["components"]["schemas"]
        assert set(schemas) == {"ErrorResponse", "UserResponse", "Extra"}
        assert spec["components"]["securitySchemes"]["bearer"]["scheme"] == "bearer"

    def test_user_schema_can_replace_builtin(self):
        options = _options(components={"schemas": {"ErrorResponse": {"type": "string"}}})
        spec = SwaggerGenerator(options).generate_spec()
        assert spec["components"]["schemas"]["ErrorResponse"] == {"type": "string"}

    def test_options_from_mapping_with_camel_case(self):
        generator = SwaggerGenerator({"title": "T", "basePath": "https://x.io"})
        assert generator.generate_spec()["servers"] == [{"url": "https://x.io"}]

    def test_options_from_file(self):
        spec = SwaggerGenerator(FIXTURES / "options.yaml").generate_spec()
        assert spec["info"]["title"] == "Fixture API"
        assert spec["info"]["contact"]["email"] == "api@example.com"
        assert spec["externalDocs"]["url"] == "https://example.com/docs"
        assert "/health" in spec["paths"]


class TestRoutes:
    def test_get_route_query_parameters(self):
        schema = obj({"name": string(), "age": number().optional()}).describe("User")
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/users",
            method="get",
            request_schema=schema,
            responses={200: RouteResponse(description="Success")},
        ))
        spec = generator.generate_spec()

        assert spec["components"]["schemas"]["User"] == {
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "number"}},
            "required": ["name"],
            "description": "User",
        }
        params = spec["paths"]["/users"]["get"]["parameters"]
        assert params == [
            {"name": "name", "in": "query", "required": True, "schema": {"type": "string"}},
            {"name": "age", "in": "query", "required": False, "schema": {"type": "number"}},
        ]
        assert "requestBody" not in spec["paths"]["/users"]["get"]

    def test_query_parameter_description(self):
        generator = SwaggerGenerator(_options())
        generator.add_route({
            "path": "/users",
            "method": "get",
            "request_schema": obj({"age": number().optional().describe("Filter by age")}),
        })
        param = generator.generate_spec()["paths"]["/users"]["get"]["parameters"][0]
        assert param == {
            "name": "age",
            "in": "query",
            "required": False,
            "description": "Filter by age",
            "schema": {"type": "number", "description": "Filter by age"},
        }

    def test_post_route_uses_refs(self):
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/users",
            method="post",
            request_schema=USER,
            responses={201: RouteResponse(description="Created", response_schema=USER)},
        ))
        spec = generator.generate_spec()
        post = spec["paths"]["/users"]["post"]

        assert post["requestBody"] == {
            "required": True,
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/User"}}},
        }
        assert post["responses"]["201"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/User"
        }
        assert post["parameters"] == []
        assert spec["components"]["schemas"]["User"]["required"] == ["name", "age"]

    def test_array_response_is_inlined(self):
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/users",
            method="get",
            responses={"200": RouteResponse(description="Success", response_schema=array(USER))},
        ))
        spec = generator.generate_spec()
        schema = spec["paths"]["/users"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema["type"] == "array"
        assert schema["items"]["description"] == "User"
        assert "User" not in spec["components"]["schemas"]

    def test_explicit_schema_name(self):
        schema = obj({"requiredField": string(), "optionalField": string().optional()})
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/test-optional",
            method="post",
            request_schema=schema,
            schema_name="TestOptional",
            responses={200: RouteResponse(description="OK")},
        ))
        spec = generator.generate_spec()
        registered = spec["components"]["schemas"]["TestOptional"]
        assert registered["required"] == ["requiredField"]
        assert registered["properties"]["optionalField"] == {"type": "string"}

    def test_nullable_body_with_schema_name(self):
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/pets",
            method="post",
            request_schema=obj({"name": string()}).nullable(),
            schema_name="Pet",
        ))
        spec = generator.generate_spec()
        body = spec["paths"]["/pets"]["post"]["requestBody"]["content"]["application/json"]["schema"]
        assert body == {"$ref": "#/components/schemas/Pet"}
        assert spec["components"]["schemas"]["Pet"]["required"] == ["name"]

    def test_path_parameters_in_order(self):
        generator = SwaggerGenerator(_options())
        generator.add_route({"path": "/orgs/{orgId}/users/{userId}", "method": "DELETE"})
        operation = generator.generate_spec()["paths"]["/orgs/{orgId}/users/{userId}"]["delete"]
        assert [p["name"] for p in operation["parameters"]] == ["orgId", "userId"]
        assert all(p["in"] == "path" and p["required"] for p in operation["parameters"])
        assert operation["responses"] == {}

    def test_operation_metadata(self):
        generator = SwaggerGenerator(_options())
        generator.add_route(RouteDefinition(
            path="/me",
            method="get",
            summary="Current user",
            description="Returns the caller",
            tags=["users"],
            security=[{"bearer": []}],
            responses={200: RouteResponse(description="OK")},
        ))
        operation = generator.generate_spec()["paths"]["/me"]["get"]
        assert operation["tags"] == ["users"]
        assert operation["summary"] == "Current user"
        assert operation["description"] == "Returns the caller"
        assert operation["security"] == [{"bearer": []}]

    def test_last_route_wins_for_same_method(self):
        generator = SwaggerGenerator(_options())
        generator.add_route({"path": "/a", "method": "get", "summary": "first"})
        generator.add_route({"path": "/a", "method": "get", "summary": "second"})
        generator.add_route({"path": "/a", "method": "post", "summary": "create"})
        path_item = generator.generate_spec()["paths"]["/a"]
        assert path_item["get"]["summary"] == "second"
        assert path_item["post"]["summary"] == "create"

    def test_post_without_schema_has_no_body(self):
        generator = SwaggerGenerator(_options())
        generator.add_route({"path": "/ping", "method": "post"})
        assert "requestBody" not in generator.generate_spec()["paths"]["/ping"]["post"]

    def test_inline_schemas_option(self):
        generator = SwaggerGenerator(_options(inline_schemas=True))
        generator.add_route({"path": "/users", "method": "post", "request_schema": USER})
        spec = generator.generate_spec()
        body = spec["paths"]["/users"]["post"]["requestBody"]["content"]["application/json"]["schema"]
        assert body["type"] == "object"
        assert "User" not in spec["components"]["schemas"]

    def test_generation_is_repeatable(self):
        generator = SwaggerGenerator(_options(components={"schemas": {"Extra": {"type": "string"}}}))
        generator.add_route({"path": "/users", "method": "post", "request_schema": USER})
        first = generator.generate_spec()
        first["components"]["schemas"]["Extra"]["type"] = "mutated"
        assert generator.generate_spec() == {
            **first,
            "components": {
                "schemas": {**first["components"]["schemas"], "Extra": {"type": "string"}},
            },
        }

    def test_add_route_chains(self):
        generator = SwaggerGenerator()
        assert generator.add_route({"path": "/a", "method": "get"}) is generator

    def test_invalid_method_rejected(self):
        with pytest.raises(ValidationError):
            SwaggerGenerator().add_route({"path": "/a", "method": "trace"})


class TestMergeDirectives:
    def test_preloaded_directive(self):
        options = _options(merge_specs=[
            {"type": "preloaded", "content": {"paths": {"/a": {"post": {"summary": "ext"}}}}},
        ])
        generator = SwaggerGenerator(options)
        generator.add_route({"path": "/a", "method": "get"})
        path_item = generator.generate_spec()["paths"]["/a"]
        assert set(path_item) == {"get", "post"}

    def test_file_directives(self):
        options = _options(merge_specs=[
            {"type": "yaml", "path": str(FIXTURES / "specs" / "petstore.yaml")},
            {"type": "json", "path": str(FIXTURES / "specs" / "orders.json")},
        ])
        spec = SwaggerGenerator(options).generate_spec()
        assert {"/pets", "/pets/{petId}", "/orders"} <= set(spec["paths"])
        assert {"Pet", "Order", "ErrorResponse"} <= set(spec["components"]["schemas"])
        # info merges recursively: the last directive's title wins
        assert spec["info"]["title"] == "Orders"

    def test_missing_file_is_skipped(self, caplog):
        options = _options(merge_specs=[
            {"type": "yaml", "path": "does/not/exist.yaml"},
            {"type": "preloaded", "content": {"paths": {"/b": {"get": {}}}}},
        ])
        with caplog.at_level(logging.WARNING, logger="schemadoc.generator.openapi"):
            spec = SwaggerGenerator(options).generate_spec()
        assert "/b" in spec["paths"]
        assert "Merge file not found" in caplog.text

    def test_unparsable_file_is_skipped(self, caplog):
        options = _options(merge_specs=[
            {"type": "yaml", "path": str(FIXTURES / "broken.yaml")},
            {"type": "json", "path": str(FIXTURES / "specs" / "orders.json")},
        ])
        with caplog.at_level(logging.ERROR, logger="schemadoc.generator.openapi"):
            spec = SwaggerGenerator(options).generate_spec()
        assert "/orders" in spec["paths"]
        assert "broken.yaml" in caplog.text

    def test_wrong_parser_is_skipped(self, caplog):
        options = _options(merge_specs=[
            {"type": "json", "path": str(FIXTURES / "specs" / "petstore.yaml")},
        ])
        with caplog.at_level(logging.ERROR):
            spec = SwaggerGenerator(options).generate_spec()
        assert "/pets" not in spec["paths"]

    def test_merge_external_docs(self):
        generator = SwaggerGenerator(_options())
        generator.merge_external_docs(FIXTURES / "specs")
        spec = generator.generate_spec()
        assert {"/pets", "/orders"} <= set(spec["paths"])
        assert [t["name"] for t in spec["tags"]] == ["orders", "pets"]

    def test_merge_external_docs_missing_path(self, caplog):
        generator = SwaggerGenerator(_options())
        with caplog.at_level(logging.ERROR):
            generator.merge_external_docs(FIXTURES / "nope")
        assert generator.options.merge_specs == []
        assert "Failed to load external docs" in caplog.text

    def test_options_are_not_shared(self):
        options = _options()
        SwaggerGenerator(options).merge_external_docs(FIXTURES / "specs")
        assert options.merge_specs == []

    def test_result_is_json_serializable(self):
        generator = SwaggerGenerator(_options())
        generator.add_route({"path": "/users", "method": "post", "request_schema": USER})
        generator.merge_external_docs(FIXTURES / "specs")
        assert json.loads(json.dumps(generator.generate_spec()))["openapi"] == "3.0.0"
