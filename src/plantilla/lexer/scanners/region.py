"""Region state scanner mixin for comments, filters and tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from plantilla.lexer.modes import CLOSE_BRACE, LexerMode

if TYPE_CHECKING:
    from plantilla.errors import ParseError
    from plantilla.lexer.position import PositionTracker
    from plantilla.lexer.scanners.content import State
    from plantilla.location import SourceLocation


class RegionScannerMixin:
    """Mixin providing the delimited-region states.

    All three regions share one rule: consume characters until the
    two-character closer, and fail if the source ends first. Opening
    delimiters inside a region have no meaning.

    """

    # These will be set by the Lexer class
    _source: str
    _tracker: PositionTracker
    _mode: LexerMode
    _start: int
    _length: int
    _region_location: SourceLocation | None

    def _error(self, message: str, location: SourceLocation | None = None) -> ParseError:
        """Build a located ParseError. Implemented by Lexer."""
        raise NotImplementedError

    def _begin_capture(self) -> None:
        """Start capturing at the current position. Implemented by Lexer."""
        raise NotImplementedError

    def _emit_region(self, mode: LexerMode, captured: str) -> None:
        """Build and append the node for a closed region. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_comment(self) -> State | None:
        return self._scan_region(LexerMode.COMMENT, self._scan_comment)

    def _scan_filter(self) -> State | None:
        return self._scan_region(LexerMode.FILTER, self._scan_filter)

    def _scan_tag(self) -> State | None:
        return self._scan_region(LexerMode.TAG, self._scan_tag)

    def _scan_region(self, mode: LexerMode, again: State) -> State | None:
        """Scan one character inside a region.

        Returns:
            ``again`` to keep scanning, or the content state once the
            closer has been consumed.
        """
        tracker = self._tracker
        char = tracker.peek()
        if not char:
            raise self._error(f"file end reached within {mode.label}", self._region_location)

        if char == mode.closer:
            nxt = tracker.peek(1)
            if not nxt:
                raise self._error(f"file end reached within {mode.label}", self._region_location)
            if nxt == CLOSE_BRACE:
                captured = self._source[self._start : self._start + self._length]
                self._emit_region(mode, captured)
                tracker.advance(2)
                self._mode = LexerMode.CONTENT
                self._begin_capture()
                return self._scan_content

        self._length += 1
        tracker.advance()
        return again
