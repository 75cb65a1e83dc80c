"""State-machine lexer for Plantilla templates.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerMode, PositionTracker
├── core.py              # Lexer class (mixin composition + node emission)
├── modes.py             # LexerMode enum, delimiter constants
├── position.py          # PositionTracker (offset, line, column)
├── builders.py          # FilterNode / TagNode construction
└── scanners/            # State functions
    ├── content.py       # Literal content, opening delimiters
    └── region.py        # Comment, filter and tag regions

Usage:
    >>> from plantilla.lexer import Lexer
    >>> for node in Lexer("Hi {{ name }}").tokenize():
    ...     print(type(node).__name__, repr(node.raw))
    ContentNode 'Hi '
    FilterNode 'name'

"""

from plantilla.lexer.core import Lexer
from plantilla.lexer.modes import LexerMode
from plantilla.lexer.position import PositionTracker

__all__ = ["Lexer", "LexerMode", "PositionTracker"]
