"""Schema node classifier.

Strips modifier layers (optional / nullable / default) down to the node
that actually describes a JSON shape, remembering whether the field was
declared optional on the way.
"""

from typing import Iterator, NamedTuple

from schemadoc.schema.nodes import MODIFIER_NODES, OptionalNode, SchemaNode


class Classification(NamedTuple):
    kind: str
    node: SchemaNode
    was_optional: bool


def _unwrap_once(node: SchemaNode) -> SchemaNode:
    if isinstance(node, MODIFIER_NODES):
        return node.inner
    return node


def layers(node: SchemaNode) -> Iterator[SchemaNode]:
    """Yield ``node`` and every wrapped child, outermost first."""
    current, previous = node, None
    while current is not previous:
        yield current
        previous = current
        current = _unwrap_once(current)


def classify(node: SchemaNode) -> Classification:
    """Unwrap ``node`` to a fixed point and report its intrinsic kind.

    ``was_optional`` is true when at least one Optional layer was stripped;
    Nullable and Default layers alone keep the field required.
    """
    was_optional = False
    base = node
    for layer in layers(node):
        if isinstance(layer, OptionalNode):
            was_optional = True
        base = layer
    return Classification(kind=base.kind, node=base, was_optional=was_optional)


def unwrap(node: SchemaNode) -> SchemaNode:
    return classify(node).node


def is_optional(node: SchemaNode) -> bool:
    return classify(node).was_optional
