"""Prisma DMMF model metadata -> object schema."""

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
    string,
)

SCALAR_TYPES = {
    "String": string,
    "Int": number,
    "Float": number,
    "Decimal": number,
    "BigInt": number,
    "Boolean": boolean,
    "DateTime": date,
    "Json": any_,
}


def _field_node(field: Any) -> SchemaNode:
    field_type = field_value(field, "type")
    if not isinstance(field_type, str):
        raise ConversionError(f"field type must be a string, got {field_type!r}")

    if field_value(field, "kind") == "enum":
        node = string()
    else:
        node = SCALAR_TYPES.get(field_type, any_)()
    if field_value(field, "isList", False):
        node = array(node)

    documentation = field_value(field, "documentation")
    return node.describe(documentation) if documentation else node


def to_schema(model: Any) -> ObjectNode:
    """Build an object schema from a DMMF model (``{"name", "fields": [...]}``)."""
    fields = field_value(model, "fields")
    if fields is None:
        raise ConversionError(
            "Invalid Prisma model: expected a DMMF model with a 'fields' list "
            "(run 'prisma generate' and pass a model from the generated DMMF)"
        )

    return build_object(
        [(field_value(f, "name"), f) for f in fields],
        _field_node,
        lambda f: bool(field_value(f, "isRequired", False)),
        "field",
    )
