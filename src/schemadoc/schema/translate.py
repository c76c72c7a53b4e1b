"""Render schema nodes as OpenAPI schema objects.

``translate`` is a pure function of its input: it reads the node tree,
never mutates it, and returns freshly allocated dicts on every call.
"""

from copy import deepcopy
from typing import Any, Callable

from schemadoc.schema.classify import classify
from schemadoc.schema.metadata import extract
from schemadoc.schema.nodes import (
    ArrayNode,
    BooleanNode,
    DateNode,
    EnumNode,
    LiteralNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
)


def _pick(meta: dict[str, Any], *keys: str) -> dict[str, Any]:
    return {key: deepcopy(meta[key]) for key in keys if key in meta}


def json_type(value: Any) -> str:
    """JSON type name of a literal value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def _string(node: SchemaNode, meta: dict) -> dict:
    return {"type": "string", **_pick(meta, "description", "example", "format")}


def _number(node: SchemaNode, meta: dict) -> dict:
    return {"type": "number", **_pick(meta, "description", "example")}


def _boolean(node: SchemaNode, meta: dict) -> dict:
    return {"type": "boolean", **_pick(meta, "description", "example")}


def _date(node: SchemaNode, meta: dict) -> dict:
    return {"type": "string", "format": "date-time"}


def _enum(node: EnumNode, meta: dict) -> dict:
    return {"type": "string", **_pick(meta, "description"), "enum": list(node.options)}


def _literal(node: LiteralNode, meta: dict) -> dict:
    return {"type": json_type(node.value), "enum": [deepcopy(node.value)]}


def _array(node: ArrayNode, meta: dict) -> dict:
    return {
        "type": "array",
        **_pick(meta, "description", "example"),
        "items": translate(node.element),
    }


def _object(node: ObjectNode, meta: dict) -> dict:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, field in node.shape.items():
        properties[name] = translate(field)
        if not classify(field).was_optional:
            required.append(name)

    result = {"type": "object", **_pick(meta, "description"), "properties": properties}
    if required:
        result["required"] = required
    return result


# kind -> (node type the handler expects, handler)
HANDLERS: dict[str, tuple[type, Callable[[Any, dict], dict]]] = {
    "string": (StringNode, _string),
    "number": (NumberNode, _number),
    "boolean": (BooleanNode, _boolean),
    "date": (DateNode, _date),
    "enum": (EnumNode, _enum),
    "literal": (LiteralNode, _literal),
    "array": (ArrayNode, _array),
    "object": (ObjectNode, _object),
}


def translate(node: SchemaNode) -> dict[str, Any]:
    """Convert a schema node into an OpenAPI schema object.

    Unknown kinds never raise; they render as an object placeholder that
    names the kind.
    """
    classified = classify(node)
    node_type, handler = HANDLERS.get(classified.kind, (None, None))
    if handler is None or not isinstance(classified.node, node_type):
        return {
            "type": "object",
            "description": f"Unhandled schema kind: {classified.kind}",
        }
    return handler(classified.node, extract(node))
