"""Schema naming and the components.schemas pool.

Named object schemas are rendered once into the document's reusable
component pool and referenced with ``$ref`` everywhere they are used;
unnamed schemas are inlined.
"""

import logging
import re
from typing import Any

from schemadoc.generator.models import RouteDefinition
from schemadoc.schema.classify import unwrap
from schemadoc.schema.metadata import extract
from schemadoc.schema.nodes import ObjectNode, SchemaNode
from schemadoc.schema.translate import translate

logger = logging.getLogger(__name__)

REF_PREFIX = "#/components/schemas/"

_LEADING_NON_LETTERS = re.compile(r"^[^A-Za-z]+")
_WORD_START = re.compile(r"\b\w", re.ASCII)
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def derive_name(description: str) -> str | None:
    """Collapse a description into a component name.

    "User profile" -> "UserProfile", "2fa-code!" -> "FaCode".
    """
    text = _LEADING_NON_LETTERS.sub("", description)
    text = _WORD_START.sub(lambda m: m.group(0).upper(), text)
    return _NON_ALNUM.sub("", text) or None


class SchemaRegistry:
    """Names schemas and stores them in a components.schemas mapping."""

    def __init__(
        self,
        schemas: dict[str, Any],
        routes: list[RouteDefinition],
        inline: bool = False,
    ):
        self.schemas = schemas
        self.routes = routes
        self.inline = inline
        self._collisions: set[str] = set()

    def name_for(self, node: SchemaNode) -> str | None:
        """Component name for ``node``, or None when it should be inlined.

        Only object schemas are named; modifier layers (optional, nullable,
        default) around the object are looked through. An explicit
        ``schema_name`` on the route that owns this exact node wins over the
        description.
        """
        if self.inline or not isinstance(unwrap(node), ObjectNode):
            return None

        owner = next((r for r in self.routes if r.request_schema is node), None)
        if owner is not None and owner.schema_name:
            return owner.schema_name
        description = extract(node).get("description")
        return derive_name(description) if description else None

    def register(self, node: SchemaNode) -> str | None:
        name = self.name_for(node)
        if name is None:
            return None

        rendered = translate(node)
        if name not in self.schemas:
            self.schemas[name] = rendered
            logger.debug("Registered schema %s", name)
        elif self.schemas[name] != rendered and name not in self._collisions:
            self._collisions.add(name)
            logger.warning(
                "Schema name %r is already taken by a different schema; keeping the first one",
                name,
            )
        return name

    def reference(self, node: SchemaNode) -> dict[str, Any]:
        """``$ref`` to the registered component, or the inline schema."""
        name = self.register(node)
        if name is None:
            return translate(node)
        return {"$ref": f"{REF_PREFIX}{name}"}
