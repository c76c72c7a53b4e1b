"""Shared helpers for the metadata converters."""

from typing import Any, Callable

from schemadoc.schema.nodes import ObjectNode, SchemaNode, obj


class ConversionError(ValueError):
    """Raised when source metadata cannot be turned into a schema."""


def field_value(source: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a mapping or an attribute-style object."""
    if isinstance(source, dict):
        return source.get(key, default)
    return getattr(source, key, default)


def build_object(
    entries: list[tuple[str, Any]],
    convert: Callable[[Any], SchemaNode],
    is_required: Callable[[Any], bool],
    label: str,
) -> ObjectNode:
    """Convert (name, metadata) pairs into an object schema.

    Non-required entries are wrapped in Optional. Any failure is re-raised
    as a ConversionError naming the offending entry.
    """
    shape: dict[str, SchemaNode] = {}
    for name, meta in entries:
        try:
            node = convert(meta)
            shape[name] = node if is_required(meta) else node.optional()
        except Exception as exc:
            raise ConversionError(f"Error processing {label} {name}: {exc}") from exc
    return obj(shape)
