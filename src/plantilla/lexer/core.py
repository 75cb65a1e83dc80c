"""State-machine lexer turning template source into nodes.

Each state is a bound method that consumes characters through the
PositionTracker and returns the next state, or None when the source is
exhausted in content. Scanning is strictly forward with two characters
of lookahead, so locations in error messages are exact.

No regex in the scanning loop. Expressions are compiled separately once
a ``{{ }}`` region closes.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from plantilla.config import TemplateConfig, get_template_config
from plantilla.errors import ParseError
from plantilla.lexer.builders import build_filter_node, build_tag_node
from plantilla.lexer.modes import LexerMode
from plantilla.lexer.position import PositionTracker
from plantilla.lexer.scanners import ContentScannerMixin, RegionScannerMixin
from plantilla.nodes import ContentNode
from plantilla.utils.logger import get_logger

if TYPE_CHECKING:
    from plantilla.lexer.scanners.content import State
    from plantilla.location import SourceLocation
    from plantilla.nodes import TemplateNode

logger = get_logger(__name__)


class Lexer(
    ContentScannerMixin,
    RegionScannerMixin,
):
    """State-machine lexer producing the node sequence of a template.

    Usage:
            >>> nodes = Lexer("Hello {{ name }}!{# note #}").tokenize()
            >>> [type(node).__name__ for node in nodes]
            ['ContentNode', 'FilterNode', 'ContentNode']

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_tracker",
        "_mode",
        "_nodes",
        "_start",  # Offset where the current capture began
        "_length",  # Characters captured since _start
        "_capture_location",
        "_region_location",  # Location of the "{" opening the current region
        "_tags",
        "_filters",
        "_autoescape",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        config: TemplateConfig | None = None,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: Template source text
            source_file: Template name for error messages
            config: Template configuration (current context default if None)
        """
        config = config or get_template_config()
        self._source = source
        self._source_file = source_file
        self._tracker = PositionTracker(source, source_file)
        self._mode = LexerMode.CONTENT
        self._nodes: list[TemplateNode] = []
        self._tags = config.get_tag_registry()
        self._filters = config.get_filter_registry()
        self._autoescape = config.autoescape
        self._region_location: SourceLocation | None = None
        self._begin_capture()

    def tokenize(self) -> tuple[TemplateNode, ...]:
        """Run the state machine over the whole source.

        Returns:
            Nodes in source order

        Raises:
            ParseError: On the first lexical or structural error
        """
        state: State | None = self._scan_content
        while state is not None:
            state = state()

        logger.debug("Lexed %d nodes from %s", len(self._nodes), self._source_file or "<string>")
        return tuple(self._nodes)

    @property
    def mode(self) -> LexerMode:
        return self._mode

    # =========================================================================
    # Capture bookkeeping
    # =========================================================================

    def _begin_capture(self) -> None:
        self._start = self._tracker.offset
        self._length = 0
        self._capture_location = self._tracker.location()

    def _flush_content(self) -> None:
        if self._length == 0:
            return
        text = self._source[self._start : self._start + self._length]
        self._nodes.append(ContentNode(location=self._capture_location, raw=text, text=text))
        self._begin_capture()

    def _state_for(self, mode: LexerMode) -> State:
        if mode is LexerMode.COMMENT:
            return self._scan_comment
        if mode is LexerMode.FILTER:
            return self._scan_filter
        return self._scan_tag

    def _emit_region(self, mode: LexerMode, captured: str) -> None:
        location = self._region_location or self._capture_location
        if mode is LexerMode.FILTER:
            node = build_filter_node(captured, location, self._filters, autoescape=self._autoescape)
        elif mode is LexerMode.TAG:
            node = build_tag_node(captured, location, self._tags)
        else:
            return
        self._nodes.append(node)

    def _error(self, message: str, location: SourceLocation | None = None) -> ParseError:
        loc = location or self._tracker.location()
        return ParseError(
            message,
            lineno=loc.lineno,
            col_offset=loc.col_offset,
            source_file=self._source_file,
        )
