"""State scanners for the Plantilla lexer.

Each scanner is a mixin providing the state functions for one part of
the state machine: literal content, and the delimited regions.
"""

from __future__ import annotations

from plantilla.lexer.scanners.content import ContentScannerMixin
from plantilla.lexer.scanners.region import RegionScannerMixin

__all__ = [
    "ContentScannerMixin",
    "RegionScannerMixin",
]
