"""Typed schema nodes: the input of the translation engine.

A schema is a tree of immutable nodes. Leaf and composite kinds
(string, number, boolean, date, object, array, enum, literal) describe
a JSON shape; modifier kinds (optional, nullable, default) wrap exactly
one child and only change how that child is interpreted.

Build trees with the module-level constructors and the fluent methods::

    user = obj({
        "id": string().uuid(),
        "name": string().describe("Display name"),
        "age": number().optional(),
    }).describe("User")

Every fluent method returns a new node; nodes are never mutated.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


class SchemaNode(BaseModel):
    """Base node. ``kind`` is the discriminant read by the classifier."""

    model_config = ConfigDict(frozen=True)

    kind: str
    description: str | None = None
    example: Any = None
    examples: tuple[Any, ...] | None = None

    def describe(self, description: str) -> "SchemaNode":
        return self.model_copy(update={"description": description})

    def with_example(self, example: Any) -> "SchemaNode":
        return self.model_copy(update={"example": example})

    def with_examples(self, *examples: Any) -> "SchemaNode":
        return self.model_copy(update={"examples": tuple(examples)})

    def optional(self) -> "OptionalNode":
        return OptionalNode(inner=self)

    def nullable(self) -> "NullableNode":
        return NullableNode(inner=self)

    def default(self, value: Any) -> "DefaultNode":
        return DefaultNode(inner=self, value=value)


class StringCheck(BaseModel):
    """A validation constraint attached to a string node."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["uuid", "email", "datetime", "regex"]
    pattern: str | None = None


class StringNode(SchemaNode):
    kind: Literal["string"] = "string"
    checks: tuple[StringCheck, ...] = ()

    def _check(self, check: StringCheck) -> "StringNode":
        return self.model_copy(update={"checks": self.checks + (check,)})

    def uuid(self) -> "StringNode":
        return self._check(StringCheck(kind="uuid"))

    def email(self) -> "StringNode":
        return self._check(StringCheck(kind="email"))

    def datetime(self) -> "StringNode":
        return self._check(StringCheck(kind="datetime"))

    def regex(self, pattern: str) -> "StringNode":
        return self._check(StringCheck(kind="regex", pattern=pattern))


class NumberNode(SchemaNode):
    kind: Literal["number"] = "number"


class BooleanNode(SchemaNode):
    kind: Literal["boolean"] = "boolean"


class DateNode(SchemaNode):
    kind: Literal["date"] = "date"


class ObjectNode(SchemaNode):
    """Object with named properties.

    ``shape`` keeps declaration order; that order is the order of the
    rendered ``properties`` and ``required`` lists.
    """

    kind: Literal["object"] = "object"
    shape: dict[str, SchemaNode] = {}


class ArrayNode(SchemaNode):
    kind: Literal["array"] = "array"
    element: SchemaNode


class EnumNode(SchemaNode):
    kind: Literal["enum"] = "enum"
    options: tuple[str, ...]


class LiteralNode(SchemaNode):
    kind: Literal["literal"] = "literal"
    value: Any


class AnyNode(SchemaNode):
    """Unknown / pass-through value. Rendered as a placeholder object."""

    kind: Literal["any"] = "any"


class OptionalNode(SchemaNode):
    kind: Literal["optional"] = "optional"
    inner: SchemaNode


class NullableNode(SchemaNode):
    kind: Literal["nullable"] = "nullable"
    inner: SchemaNode


class DefaultNode(SchemaNode):
    kind: Literal["default"] = "default"
    inner: SchemaNode
    value: Any = None


MODIFIER_NODES = (OptionalNode, NullableNode, DefaultNode)


# -- constructors -------------------------------------------------------------

def string() -> StringNode:
    return StringNode()


def number() -> NumberNode:
    return NumberNode()


def boolean() -> BooleanNode:
    return BooleanNode()


def date() -> DateNode:
    return DateNode()


def obj(shape: dict[str, SchemaNode] | None = None) -> ObjectNode:
    return ObjectNode(shape=shape or {})


def array(element: SchemaNode) -> ArrayNode:
    return ArrayNode(element=element)


def enum(options: list[str] | tuple[str, ...]) -> EnumNode:
    return EnumNode(options=tuple(options))


def literal(value: Any) -> LiteralNode:
    return LiteralNode(value=value)


def any_() -> AnyNode:
    return AnyNode()


def object_id() -> StringNode:
    """24-hex-digit document identifier."""
    return string().regex(OBJECT_ID_PATTERN)
