from schemadoc.schema.nodes import (
    SchemaNode,
    any_,
    array,
    boolean,
    date,
    enum,
    literal,
    number,
    obj,
    string,
)
from schemadoc.schema.translate import translate


class TestPrimitives:
    def test_string_with_metadata(self):
        node = string().uuid().describe("Id").with_example("abc")
        assert translate(node) == {
            "type": "string",
            "description": "Id",
            "example": "abc",
            "format": "uuid",
        }

    def test_number_and_boolean(self):
        assert translate(number()) == {"type": "number"}
        assert translate(boolean().describe("Active")) == {"type": "boolean", "description": "Active"}

    def test_date_always_has_format(self):
        assert translate(date()) == {"type": "string", "format": "date-time"}
        assert translate(date().optional()) == {"type": "string", "format": "date-time"}

    def test_enum(self):
        node = enum(["draft", "published"]).describe("Status")
        assert translate(node) == {
            "type": "string",
            "description": "Status",
            "enum": ["draft", "published"],
        }

    def test_literal_types(self):
        assert translate(literal("on")) == {"type": "string", "enum": ["on"]}
        assert translate(literal(3)) == {"type": "number", "enum": [3]}
        assert translate(literal(True)) == {"type": "boolean", "enum": [True]}
        assert translate(literal(None)) == {"type": "object", "enum": [None]}


class TestComposites:
    def test_array(self):
        node = array(string()).describe("Tags")
        assert translate(node) == {
            "type": "array",
            "description": "Tags",
            "items": {"type": "string"},
        }

    def test_object_required_order(self):
        node = obj({
            "zeta": string(),
            "alpha": number().optional(),
            "mid": boolean().nullable(),
            "last": string().default("x"),
        })
        result = translate(node)
        assert list(result["properties"]) == ["zeta", "alpha", "mid", "last"]
        assert result["required"] == ["zeta", "mid", "last"]

    def test_optional_deep_in_chain_is_not_required(self):
        node = obj({"a": string().optional().nullable()})
        assert "required" not in translate(node)

    def test_object_without_required(self):
        node = obj({"a": string().optional()}).describe("Filter")
        assert translate(node) == {
            "type": "object",
            "description": "Filter",
            "properties": {"a": {"type": "string"}},
        }

    def test_nested(self):
        node = obj({
            "items": array(obj({"sku": string(), "qty": number()})),
        })
        result = translate(node)
        assert result["properties"]["items"]["items"]["required"] == ["sku", "qty"]


class TestFallback:
    def test_unknown_kind_renders_placeholder(self):
        assert translate(SchemaNode(kind="record")) == {
            "type": "object",
            "description": "Unhandled schema kind: record",
        }

    def test_any(self):
        assert translate(any_().optional()) == {
            "type": "object",
            "description": "Unhandled schema kind: any",
        }

    def test_known_kind_on_wrong_node_type(self):
        assert translate(SchemaNode(kind="array"))["description"] == "Unhandled schema kind: array"


class TestPurity:
    def test_referentially_transparent(self):
        node = obj({"name": string().with_examples(["a"]), "tags": array(string())})
        first = translate(node)
        first["properties"]["name"]["example"].append("mutated")
        assert translate(node) == {
            "type": "object",
            "properties": {
                "name": {"type": "string", "example": ["a"]},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["name", "tags"],
        }

    def test_builders_do_not_mutate(self):
        base = string()
        base.describe("x").uuid()
        assert base.description is None
        assert base.checks == ()
