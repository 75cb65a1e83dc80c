"""Incremental position tracking over template source.

The tracker moves strictly forward, one character at a time, and keeps
line/column in step with the character at the current offset. Positions
are never recomputed by rescanning from the start of the source.

Column convention: the first character of a line is column 1; a newline
character bumps the line and is itself reported at column 0. Only "\\n"
ends a line, so "\\r\\n" sources count the "\\r" as an ordinary column.
Offsets and columns count characters (code points) of the decoded str,
not bytes: in non-ASCII sources they differ from byte offsets into the
encoded file.

Thread Safety:
Tracker instances are single-use and owned by one Lexer.

"""

from __future__ import annotations

from plantilla.location import SourceLocation


class PositionTracker:
    """Forward-only cursor with line/column bookkeeping.

    Usage:
            >>> tracker = PositionTracker("ab\\ncd")
            >>> tracker.peek(), tracker.lineno, tracker.col
            ('a', 1, 1)
            >>> tracker.advance(3)
            True
            >>> tracker.peek(), tracker.lineno, tracker.col
            ('c', 2, 1)
            >>> tracker.advance(5)
            False

    """

    __slots__ = ("_source", "_source_len", "_source_file", "offset", "lineno", "col")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        self._source = source
        self._source_len = len(source)
        self._source_file = source_file
        self.offset = 0
        self.lineno = 1
        self.col = 0
        # Account for the character at offset 0 (it may be a newline)
        self._update()

    @property
    def at_end(self) -> bool:
        return self.offset >= self._source_len

    def peek(self, rel: int = 0) -> str:
        """Return the character at offset + rel, or "" once past the end."""
        pos = self.offset + rel
        if pos >= self._source_len:
            return ""
        return self._source[pos]

    def advance(self, n: int = 1) -> bool:
        """Move forward n characters, updating line/column after each one.

        Returns:
            False as soon as the cursor runs past the end of the source.
            Scanning states use this to stop without raising.
        """
        for _ in range(n):
            self.offset += 1
            if not self._update():
                return False
        return True

    def _update(self) -> bool:
        if self.offset >= self._source_len:
            return False
        if self._source[self.offset] == "\n":
            self.lineno += 1
            self.col = 0
        else:
            self.col += 1
        return True

    def location(self) -> SourceLocation:
        """Snapshot the current position."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col,
            offset=self.offset,
            source_file=self._source_file,
        )
