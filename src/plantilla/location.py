"""Source location tracking for error messages and debugging.

Provides SourceLocation dataclass for tracking positions in template source.
Every node carries the location of its first character.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    Lines are 1-indexed. Columns follow the position tracker: the first
    character of a line is column 1, and a newline character is reported
    as column 0 of the line it starts.

    Attributes:
        lineno: Line number
        col_offset: Column of the character at ``offset``
        offset: Absolute character offset in the source
        source_file: Template name (optional)

    Examples:
            >>> loc = SourceLocation(lineno=3, col_offset=7, offset=40, source_file="page.html")
            >>> str(loc)
            'page.html:3:7'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "page.html:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"
