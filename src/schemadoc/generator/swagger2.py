"""Downgrade an assembled OpenAPI 3 document to Swagger 2.0.

Only paths, schemas/definitions, parameters, request bodies (as a body
parameter) and JSON response content are converted. Request bodies and
responses referenced from components are resolved first; a request body
with no JSON schema produces no body parameter.
"""

from copy import deepcopy
from typing import Any
from urllib.parse import urlparse

JSON_CONTENT = "application/json"
DEFAULT_SERVER_URL = "http://localhost"

OPENAPI_REF_PREFIX = "#/components/schemas/"
SWAGGER2_REF_PREFIX = "#/definitions/"


def _host(spec: dict[str, Any]) -> str:
    servers = spec.get("servers")
    first = servers[0] if isinstance(servers, list) and servers else None
    url = first.get("url") if isinstance(first, dict) else None
    return urlparse(url or DEFAULT_SERVER_URL).netloc or "localhost"


def _json_schema(content: Any) -> Any:
    if not isinstance(content, dict):
        return None
    media = content.get(JSON_CONTENT)
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def _resolve(value: Any, components: dict[str, Any], section: str) -> Any:
    """Follow a ``#/components/<section>/<name>`` ref; other values pass through."""
    if not isinstance(value, dict) or "$ref" not in value:
        return value
    prefix = f"#/components/{section}/"
    ref = value["$ref"]
    if not isinstance(ref, str) or not ref.startswith(prefix):
        return value
    entries = components.get(section)
    if not isinstance(entries, dict):
        return None
    return entries.get(ref[len(prefix):])


def _convert_operation(operation: dict[str, Any], components: dict[str, Any]) -> dict[str, Any]:
    converted: dict[str, Any] = {}
    for key in ("tags", "summary", "description"):
        if operation.get(key) is not None:
            converted[key] = deepcopy(operation[key])
    converted["responses"] = {}

    if "parameters" in operation:
        converted["parameters"] = [deepcopy(p) for p in operation["parameters"] or []]

    request_body = _resolve(operation.get("requestBody"), components, "requestBodies")
    body_schema = _json_schema(request_body.get("content")) if isinstance(request_body, dict) else None
    if body_schema is not None:
        converted["consumes"] = [JSON_CONTENT]
        converted["parameters"] = converted.get("parameters", []) + [
            {"in": "body", "name": "body", "schema": deepcopy(body_schema)}
        ]

    for status_code, response in (operation.get("responses") or {}).items():
        response = _resolve(response, components, "responses")
        if isinstance(response, dict) and "$ref" in response:
            # refs outside components.responses are kept as they are
            converted["responses"][str(status_code)] = deepcopy(response)
            continue
        response = response if isinstance(response, dict) else {}
        flat = {"description": response.get("description") or ""}
        schema = _json_schema(response.get("content"))
        if schema is not None:
            flat["schema"] = deepcopy(schema)
        converted["responses"][str(status_code)] = flat

    if operation.get("security") is not None:
        converted["security"] = deepcopy(operation["security"])
    return converted


def to_swagger2(spec: dict[str, Any], rewrite_refs: bool = False) -> dict[str, Any]:
    """Convert an OpenAPI 3 document into a Swagger 2.0 document.

    With ``rewrite_refs`` every ``#/components/schemas/`` reference is
    pointed at ``#/definitions/``; by default references pass through.
    """
    doc: dict[str, Any] = {
        "swagger": "2.0",
        "info": deepcopy(spec.get("info", {})),
        "host": _host(spec),
        "basePath": "/",
        "paths": {},
        "definitions": deepcopy((spec.get("components") or {}).get("schemas") or {}),
        "tags": deepcopy(spec.get("tags") or []),
    }

    components = spec.get("components") if isinstance(spec.get("components"), dict) else {}
    for path, methods in (spec.get("paths") or {}).items():
        if not isinstance(methods, dict):
            doc["paths"][path] = deepcopy(methods)
            continue
        doc["paths"][path] = {}
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                doc["paths"][path][method] = deepcopy(operation)
                continue
            doc["paths"][path][method] = _convert_operation(operation, components)

    if rewrite_refs:
        doc = update_schema_refs(doc)
    return doc


def update_schema_refs(node: Any) -> Any:
    """Return a copy of ``node`` with component refs pointed at definitions."""
    if isinstance(node, dict):
        return {
            key: (
                value.replace(OPENAPI_REF_PREFIX, SWAGGER2_REF_PREFIX)
                if key == "$ref" and isinstance(value, str)
                else update_schema_refs(value)
            )
            for key, value in node.items()
        }
    if isinstance(node, list):
        return [update_schema_refs(item) for item in node]
    return node
