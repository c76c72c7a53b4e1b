"""Data models for route registrations and generator options.

Options accept both snake_case and camelCase keys, so an options file can
be written in the usual OpenAPI spelling (``basePath``, ``mergeSpecs``...).
"""

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from schemadoc.merge.loader import load_spec_file
from schemadoc.schema.nodes import SchemaNode

HttpMethod = Literal["get", "post", "put", "delete", "patch"]


class RouteResponse(BaseModel):
    """One documented response of a route."""

    description: str
    response_schema: SchemaNode | None = None


class RouteDefinition(BaseModel):
    """A single route to document."""

    path: str  # /users/{id}
    method: HttpMethod
    request_schema: SchemaNode | None = None  # body, or query for GET
    schema_name: str | None = None
    responses: dict[int | str, RouteResponse] = {}
    summary: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    security: list[dict[str, list[str]]] | None = None

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Contact(_CamelModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(_CamelModel):
    name: str
    url: str | None = None


class ExternalDocs(_CamelModel):
    url: str
    description: str | None = None


class FileMergeSpec(BaseModel):
    """Merge a JSON or YAML document read from ``path``."""

    type: Literal["json", "yaml"]
    path: Path


class PreloadedMergeSpec(BaseModel):
    """Merge an already parsed document."""

    type: Literal["preloaded"]
    content: dict[str, Any]


MergeSpec = Annotated[FileMergeSpec | PreloadedMergeSpec, Field(discriminator="type")]


class GeneratorOptions(_CamelModel):
    """Document-level settings for a SwaggerGenerator."""

    title: str = "API"
    version: str = "1.0.0"
    description: str = "API documentation"
    base_path: str | None = None  # server URL
    contact: Contact | None = None
    external_docs: ExternalDocs | None = None
    terms_of_service: str | None = None
    license: License | None = None
    components: dict[str, dict[str, Any]] = {}
    tags: list[dict[str, Any]] = []
    merge_specs: list[MergeSpec] = []
    inline_schemas: bool = False  # never emit $ref, always inline

    @classmethod
    def from_file(cls, file_path: str | Path) -> "GeneratorOptions":
        """Load options from a .json, .yml or .yaml file."""
        data = load_spec_file(Path(file_path))
        return cls.model_validate(data or {})
