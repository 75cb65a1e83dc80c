"""Utility modules for Plantilla.

Provides:
- text: escape_html, strip_tags for the built-in filters
- logger: get_logger for logging
"""

from plantilla.utils.logger import get_logger
from plantilla.utils.text import escape_html, strip_tags

__all__ = [
    "escape_html",
    "get_logger",
    "strip_tags",
]
