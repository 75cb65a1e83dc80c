"""Lexer scanning modes and delimiter constants.

Each mode is a state of the lexer's finite state machine. Region modes
know their closing delimiter and the word used in "file end reached
within ..." errors.
"""

from __future__ import annotations

from enum import Enum

# Opening delimiters all start with "{"; the second character picks the mode
OPEN_BRACE = "{"
CLOSE_BRACE = "}"


class LexerMode(Enum):
    """Lexer operating modes.

    - CONTENT: Literal text between regions
    - COMMENT: Inside {# ... #}
    - FILTER: Inside {{ ... }}
    - TAG: Inside {% ... %}

    """

    CONTENT = ("", "")
    COMMENT = ("#", "comment")
    FILTER = ("{", "filter")
    TAG = ("%", "tag")

    def __init__(self, marker: str, label: str) -> None:
        self.marker = marker
        self.label = label

    @property
    def closer(self) -> str:
        """First character of the two-character closing delimiter."""
        return CLOSE_BRACE if self is LexerMode.FILTER else self.marker


# Second character after "{" -> region mode
OPENERS: dict[str, LexerMode] = {
    LexerMode.COMMENT.marker: LexerMode.COMMENT,
    LexerMode.FILTER.marker: LexerMode.FILTER,
    LexerMode.TAG.marker: LexerMode.TAG,
}
