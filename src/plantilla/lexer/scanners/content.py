"""Content state scanner mixin."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from plantilla.lexer.modes import OPEN_BRACE, OPENERS, LexerMode

if TYPE_CHECKING:
    from plantilla.errors import ParseError
    from plantilla.lexer.position import PositionTracker
    from plantilla.location import SourceLocation

State = Callable[[], "State | None"]


class ContentScannerMixin:
    """Mixin providing the literal-content state.

    Accumulates characters until an opening delimiter. ``{`` must be
    followed by ``#``, ``%`` or ``{``; anything else is a parse error.

    """

    # These will be set by the Lexer class
    _tracker: PositionTracker
    _mode: LexerMode
    _length: int
    _region_location: SourceLocation | None

    def _flush_content(self) -> None:
        """Emit pending literal text. Implemented by Lexer."""
        raise NotImplementedError

    def _begin_capture(self) -> None:
        """Start capturing at the current position. Implemented by Lexer."""
        raise NotImplementedError

    def _error(self, message: str, location: SourceLocation | None = None) -> ParseError:
        """Build a located ParseError. Implemented by Lexer."""
        raise NotImplementedError

    def _state_for(self, mode: LexerMode) -> State:
        """Return the state function for a region mode. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_content(self) -> State | None:
        """Scan one character of literal content.

        Returns:
            Next state, or None once the source is exhausted.
        """
        tracker = self._tracker
        char = tracker.peek()
        if not char:
            self._flush_content()
            return None

        if char == OPEN_BRACE:
            here = tracker.location()
            marker = tracker.peek(1)
            if not marker:
                raise self._error("file end reached after opening '{'", here)

            mode = OPENERS.get(marker)
            if mode is None:
                raise self._error(f"unknown open command ('{marker}')", here)

            self._flush_content()
            self._region_location = here
            self._mode = mode
            tracker.advance(2)
            self._begin_capture()
            return self._state_for(mode)

        self._length += 1
        tracker.advance()
        return self._scan_content
