"""Typed template nodes for Plantilla.

All nodes are frozen dataclasses with slots for:
- Immutability: a parsed template can be rendered from many threads
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: the execution engine dispatches with ``match``

Node Hierarchy:
Node (base)
├── ContentNode   literal text
├── FilterNode    {{ expression|filter }}
└── TagNode       {% name args %}
    └── MarkerNode  handler-less stop marker such as endif or else

Every node records the location of its first character (the ``{`` of a
region) and ``raw``, the trimmed text between the delimiters. Error
messages quote ``raw`` so users can find the offending construct.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plantilla.expressions import Expression
    from plantilla.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all template nodes."""

    location: SourceLocation
    raw: str

    @property
    def lineno(self) -> int:
        return self.location.lineno

    @property
    def col_offset(self) -> int:
        return self.location.col_offset


@dataclass(frozen=True, slots=True)
class ContentNode(Node):
    """Literal text emitted verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class FilterNode(Node):
    """Expression output: ``{{ user.name|title }}``.

    With auto-escape enabled the expression pipeline already ends with the
    ``escape`` filter.
    """

    expression: Expression


@dataclass(frozen=True, slots=True)
class TagNode(Node):
    """Tag invocation: ``{% for item in items %}``.

    The handler is not stored on the node. ``name`` is the key into the
    template's tag registry, and ``args`` is passed to the handler verbatim.
    """

    name: str
    args: str


@dataclass(frozen=True, slots=True)
class MarkerNode(TagNode):
    """Structural marker with no handler (``else``, ``endif``, ``endfor``).

    Only meaningful as a stop marker for an enclosing control tag.
    Reaching one during normal rendering is an error.
    """

    pass


TemplateNode = ContentNode | FilterNode | TagNode


__all__ = [
    "ContentNode",
    "FilterNode",
    "MarkerNode",
    "Node",
    "TagNode",
    "TemplateNode",
]
