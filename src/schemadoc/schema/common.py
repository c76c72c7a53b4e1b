"""Ready-made field schemas with sensible documentation defaults."""

from schemadoc.schema.nodes import SchemaNode, string

DEFAULT_UUID_EXAMPLE = "550e8400-e29b-41d4-a716-446655440000"
DEFAULT_EMAIL_EXAMPLE = "user@example.com"


def uuid(description: str | None = None, example: str | None = None) -> SchemaNode:
    return (
        string()
        .uuid()
        .describe(description or "Unique identifier")
        .with_example(example or DEFAULT_UUID_EXAMPLE)
    )


def email(description: str | None = None, example: str | None = None) -> SchemaNode:
    return (
        string()
        .email()
        .describe(description or "Valid email address")
        .with_example(example or DEFAULT_EMAIL_EXAMPLE)
    )
