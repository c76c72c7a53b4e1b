"""Document-store (Mongoose-style) schema metadata -> object schema.

Expects the ``paths`` mapping of a document schema: field name to a path
description carrying ``instance`` (the type name), ``isRequired`` and,
for arrays, a ``caster`` with the element ``instance`` (or ``arrayType``).
"""

from typing import Any

from schemadoc.converters.base import ConversionError, build_object, field_value
from schemadoc.schema.nodes import (
    ObjectNode,
    SchemaNode,
    any_,
    array,
    boolean,
    date,
    number,
    object_id,
    string,
)

BASIC_TYPES = {
    "string": string,
    "number": number,
    "decimal128": number,
    "boolean": boolean,
    "date": date,
    "objectid": object_id,
    "uuid": lambda: string().uuid(),
}


def _basic_node(type_name: str) -> SchemaNode:
    return BASIC_TYPES.get(type_name, any_)()


def _type_name(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConversionError(f"expected a type name, got {type(value).__name__}")
    return value.lower()


def _path_node(info: Any) -> SchemaNode:
    instance = _type_name(field_value(info, "instance"))
    if instance == "array":
        caster = field_value(info, "caster")
        element = _type_name(field_value(caster, "instance") if caster is not None else None)
        element = element or _type_name(field_value(info, "arrayType")) or "string"
        node = array(_basic_node(element))
    else:
        node = _basic_node(instance or "")

    description = field_value(info, "description")
    return node.describe(description) if description else node


def to_schema(schema: Any) -> ObjectNode:
    """Build an object schema from document-store path metadata."""
    paths = field_value(schema, "paths")
    if not isinstance(paths, dict):
        raise ConversionError(
            "Invalid document-store schema: expected a 'paths' mapping of field definitions"
        )

    return build_object(
        list(paths.items()),
        _path_node,
        lambda info: bool(field_value(info, "isRequired", False)),
        "path",
    )
