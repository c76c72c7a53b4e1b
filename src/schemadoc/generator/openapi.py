"""OpenAPI 3 document assembly.

SwaggerGenerator collects route definitions and turns them into a
complete OpenAPI 3.0 document: parameters, request bodies, responses and
a components.schemas pool shared by every route. Configured merge
directives are applied to the assembled document.
"""

import logging
import re
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml

from schemadoc.generator.models import (
    FileMergeSpec,
    GeneratorOptions,
    PreloadedMergeSpec,
    RouteDefinition,
)
from schemadoc.generator.registry import SchemaRegistry
from schemadoc.generator.swagger2 import to_swagger2
from schemadoc.merge.deep_merge import deep_merge_specs
from schemadoc.merge.loader import load_spec_file, load_specs
from schemadoc.schema.classify import classify
from schemadoc.schema.metadata import extract
from schemadoc.schema.nodes import ObjectNode
from schemadoc.schema.translate import translate

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
BODY_METHODS = ("post", "put", "patch")
PATH_PARAM = re.compile(r"{([^}]+)}")

BUILTIN_SCHEMAS: dict[str, dict[str, Any]] = {
    "ErrorResponse": {
        "type": "object",
        "properties": {
            "message": {"type": "string"},
            "code": {"type": "string"},
        },
    },
    "UserResponse": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "name": {"type": "string"},
        },
    },
}


def _resolve_options(options: GeneratorOptions | Mapping | str | Path | None) -> GeneratorOptions:
    if options is None:
        return GeneratorOptions()
    if isinstance(options, GeneratorOptions):
        return options.model_copy(deep=True)
    if isinstance(options, (str, Path)):
        return GeneratorOptions.from_file(options)
    return GeneratorOptions.model_validate(dict(options))


class SwaggerGenerator:
    """Builds OpenAPI 3 / Swagger 2 documents from route definitions."""

    def __init__(self, options: GeneratorOptions | Mapping | str | Path | None = None):
        self.options = _resolve_options(options)
        self.routes: list[RouteDefinition] = []

    def add_route(self, route: RouteDefinition | Mapping) -> "SwaggerGenerator":
        """Register a route. Returns the generator for chaining."""
        if not isinstance(route, RouteDefinition):
            route = RouteDefinition.model_validate(dict(route))
        self.routes.append(route)
        return self

    # -- document assembly ----------------------------------------------------

    def _new_document(self) -> dict[str, Any]:
        opts = self.options
        info: dict[str, Any] = {
            "title": opts.title,
            "version": opts.version,
            "description": opts.description,
        }
        if opts.contact:
            info["contact"] = opts.contact.model_dump(exclude_none=True)
        if opts.terms_of_service:
            info["termsOfService"] = opts.terms_of_service
        if opts.license:
            info["license"] = opts.license.model_dump(exclude_none=True)

        components = deepcopy(opts.components)
        schemas = {**deepcopy(BUILTIN_SCHEMAS), **(components.pop("schemas", None) or {})}

        spec: dict[str, Any] = {"openapi": OPENAPI_VERSION, "info": info}
        if opts.base_path:
            spec["servers"] = [{"url": opts.base_path}]
        if opts.external_docs:
            spec["externalDocs"] = opts.external_docs.model_dump(exclude_none=True)
        if opts.tags:
            spec["tags"] = deepcopy(opts.tags)
        spec["paths"] = {}
        spec["components"] = {"schemas": schemas, **components}
        return spec

    def generate_spec(self) -> dict[str, Any]:
        """Assemble the OpenAPI 3 document and apply merge directives.

        Every call builds a fresh document; registered routes are only read.
        """
        spec = self._new_document()
        registry = SchemaRegistry(
            spec["components"]["schemas"], self.routes, inline=self.options.inline_schemas
        )

        for route in self.routes:
            if route.request_schema is not None:
                registry.register(route.request_schema)
            for response in route.responses.values():
                if response.response_schema is not None:
                    registry.register(response.response_schema)

        for route in self.routes:
            spec["paths"].setdefault(route.path, {})[route.method] = self._build_operation(
                route, registry
            )
        logger.debug("Assembled %d routes into %d paths", len(self.routes), len(spec["paths"]))

        return self._merge_specs(spec)

    def _build_operation(self, route: RouteDefinition, registry: SchemaRegistry) -> dict[str, Any]:
        operation: dict[str, Any] = {}
        for key in ("tags", "summary", "description"):
            value = getattr(route, key)
            if value is not None:
                operation[key] = deepcopy(value)
        operation["parameters"] = self._build_parameters(route)
        operation["responses"] = self._build_responses(route, registry)

        if route.method in BODY_METHODS and route.request_schema is not None:
            operation["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": registry.reference(route.request_schema)}},
            }
        if route.security is not None:
            operation["security"] = deepcopy(route.security)
        return operation

    def _build_parameters(self, route: RouteDefinition) -> list[dict[str, Any]]:
        parameters = [
            {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}
            for name in PATH_PARAM.findall(route.path)
        ]

        if route.method == "get" and route.request_schema is not None:
            query = classify(route.request_schema).node
            if isinstance(query, ObjectNode):
                parameters.extend(self._query_parameters(query))
        return parameters

    def _query_parameters(self, node: ObjectNode) -> list[dict[str, Any]]:
        parameters = []
        for name, field in node.shape.items():
            description = extract(field).get("description")
            schema = translate(field)
            parameter: dict[str, Any] = {
                "name": name,
                "in": "query",
                "required": not classify(field).was_optional,
            }
            if description:
                parameter["description"] = description
                schema["description"] = description
            parameter["schema"] = schema
            parameters.append(parameter)
        return parameters

    def _build_responses(self, route: RouteDefinition, registry: SchemaRegistry) -> dict[str, Any]:
        responses: dict[str, Any] = {}
        for status_code, response in route.responses.items():
            entry: dict[str, Any] = {"description": response.description}
            if response.response_schema is not None:
                entry["content"] = {
                    "application/json": {"schema": registry.reference(response.response_schema)}
                }
            responses[str(status_code)] = entry
        return responses

    # -- merging --------------------------------------------------------------

    def _merge_specs(self, spec: dict[str, Any]) -> dict[str, Any]:
        merged = spec
        for directive in self.options.merge_specs:
            if isinstance(directive, PreloadedMergeSpec):
                merged = deep_merge_specs(merged, directive.content)
                continue

            external = self._load_directive(directive)
            if external is not None:
                merged = deep_merge_specs(merged, external)
                logger.debug("Merged %s", directive.path)
        return merged

    def _load_directive(self, directive: FileMergeSpec) -> dict[str, Any] | None:
        full_path = directive.path.resolve()
        if not full_path.exists():
            logger.warning("Merge file not found: %s", full_path)
            return None
        try:
            external = load_spec_file(full_path, directive.type)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error("Failed to parse merge file %s: %s", full_path, exc)
            return None
        if not isinstance(external, dict):
            logger.warning("Merge file %s does not contain a document, skipping", full_path)
            return None
        return external

    def merge_external_docs(self, docs_path: str | Path) -> "SwaggerGenerator":
        """Queue every spec file under ``docs_path`` for merging."""
        try:
            specs = load_specs(docs_path)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error("Failed to load external docs from %s: %s", docs_path, exc)
            return self

        for content in specs:
            if not isinstance(content, dict):
                logger.warning("Skipping non-document content in %s", docs_path)
                continue
            self.options.merge_specs.append(PreloadedMergeSpec(type="preloaded", content=content))
        return self

    # -- Swagger 2 ------------------------------------------------------------

    def generate_swagger2(
        self, spec: dict[str, Any] | None = None, rewrite_refs: bool = False
    ) -> dict[str, Any]:
        """Swagger 2.0 version of ``spec`` (or of a freshly generated document)."""
        return to_swagger2(spec if spec is not None else self.generate_spec(), rewrite_refs)
