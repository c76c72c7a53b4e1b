"""Metadata extraction: description, example and string format."""

from typing import Any

from schemadoc.schema.classify import layers
from schemadoc.schema.nodes import SchemaNode, StringNode

# First matching check wins.
STRING_FORMATS = (
    ("uuid", "uuid"),
    ("email", "email"),
    ("datetime", "date-time"),
)


def _example_of(node: SchemaNode) -> Any:
    if node.example is not None:
        return node.example
    if node.examples:
        return node.examples[0]
    return None


def string_format(node: SchemaNode) -> str | None:
    if not isinstance(node, StringNode):
        return None
    kinds = {check.kind for check in node.checks}
    for check_kind, fmt in STRING_FORMATS:
        if check_kind in kinds:
            return fmt
    return None


def extract(node: SchemaNode) -> dict[str, Any]:
    """Return the ``description``/``example``/``format`` of a node.

    Metadata may sit on any modifier layer; the outermost value wins.
    Absent values are left out of the result entirely.
    """
    description = None
    example = None
    base = node
    for layer in layers(node):
        if description is None and layer.description:
            description = layer.description
        if example is None:
            example = _example_of(layer)
        base = layer

    meta: dict[str, Any] = {}
    if description:
        meta["description"] = description
    if example is not None:
        meta["example"] = example
    fmt = string_format(base)
    if fmt:
        meta["format"] = fmt
    return meta
