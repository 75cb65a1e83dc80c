"""Node construction for closed filter and tag regions.

The lexer hands over the raw text captured between delimiters together
with the location of the opening ``{``. Builders trim and split it,
resolve names against the configured registries and return a node.

Argument parsing is left to each tag handler; only the tag name is
interpreted here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plantilla.errors import ExpressionSyntaxError, ParseError
from plantilla.expressions import compile_expression
from plantilla.filters import escape
from plantilla.nodes import FilterNode, MarkerNode, TagNode

if TYPE_CHECKING:
    from plantilla.filters import FilterRegistry
    from plantilla.location import SourceLocation
    from plantilla.tags.registry import TagRegistry

AUTOESCAPE_FILTER = "escape"


def _error(message: str, location: SourceLocation) -> ParseError:
    return ParseError(
        message,
        lineno=location.lineno,
        col_offset=location.col_offset,
        source_file=location.source_file,
    )


def split_tag(content: str) -> tuple[str, str]:
    """Split trimmed tag text on the first whitespace run.

    Example:
        >>> split_tag('if name|lower == "florian"')
        ('if', 'name|lower == "florian"')
        >>> split_tag("endif")
        ('endif', '')
    """
    parts = content.split(None, 1)
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def build_filter_node(
    captured: str,
    location: SourceLocation,
    filters: FilterRegistry,
    *,
    autoescape: bool,
) -> FilterNode:
    """Compile a ``{{ ... }}`` region into a FilterNode.

    Raises:
        ParseError: Empty region or malformed expression
    """
    content = captured.strip()
    if not content:
        raise _error("empty filter", location)

    try:
        expression = compile_expression(content, filters)
    except ExpressionSyntaxError as exc:
        raise _error(exc.message, location) from exc

    if autoescape:
        expression = expression.with_filter(
            AUTOESCAPE_FILTER, filters.get(AUTOESCAPE_FILTER) or escape
        )

    return FilterNode(location=location, raw=content, expression=expression)


def build_tag_node(
    captured: str,
    location: SourceLocation,
    tags: TagRegistry,
) -> TagNode:
    """Resolve a ``{% ... %}`` region into a TagNode or MarkerNode.

    Raises:
        ParseError: Empty region or unknown tag name
    """
    content = captured.strip()
    if not content:
        raise _error("empty tag", location)

    name, args = split_tag(content)
    if tags.is_marker(name):
        return MarkerNode(location=location, raw=content, name=name, args=args)
    if not tags.has(name):
        raise _error(f"tag '{name}' does not exist", location)
    return TagNode(location=location, raw=content, name=name, args=args)
