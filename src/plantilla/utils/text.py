"""Text helpers shared by the filters.

Example:
    >>> from plantilla.utils.text import escape_html
    >>> escape_html("<b>Tom & Jerry</b>")
    '&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;'
"""

from __future__ import annotations

import html as html_module
import re

_TAG_PATTERN = re.compile(r"<[^>]*>")


def escape_html(text: str) -> str:
    """Escape HTML special characters.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#x27;

    Args:
        text: Text to escape

    Returns:
        HTML-escaped text safe for element content and attribute values
    """
    if not text:
        return ""

    return html_module.escape(text, quote=True)


def strip_tags(text: str) -> str:
    """Remove anything that looks like an HTML tag."""
    return _TAG_PATTERN.sub("", text)
