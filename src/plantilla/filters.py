"""Filter registry and built-in filters.

Filters are plain callables ``func(value, *args) -> Any`` applied through
pipe syntax: ``{{ name|lower }}``, ``{{ items|join:", " }}``. A filter takes
at most one argument.

Filter names are resolved when an expression is compiled, so an unknown
filter is a parse error, not a render error.

Thread Safety:
FilterRegistry is immutable after creation. Safe to share.
Use FilterRegistryBuilder for mutable construction.

Example:
    >>> builder = create_filters_with_defaults()
    >>> builder.register("shout", lambda value: f"{value}!".upper())
    >>> filters = builder.build()
    >>> filters.get("shout")("hi")
    'HI!'
"""

from __future__ import annotations

from collections.abc import Callable, Sized
from typing import Any

from plantilla.context import UNDEFINED
from plantilla.utils.text import escape_html, strip_tags

FilterFunc = Callable[..., Any]


class SafeString(str):
    """A string already safe for HTML output.

    The ``escape`` filter passes SafeString values through unchanged,
    which is how ``|safe`` opts a value out of auto-escaping.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"SafeString({str.__repr__(self)})"


class FilterRegistry:
    """Immutable mapping of filter names to callables."""

    __slots__ = ("_by_name",)

    def __init__(self, by_name: dict[str, FilterFunc]) -> None:
        """Initialize registry with a pre-built mapping.

        Use FilterRegistryBuilder to create instances.
        """
        self._by_name = by_name

    def get(self, name: str) -> FilterFunc | None:
        """Get the callable registered for name, or None."""
        return self._by_name.get(name)

    def has(self, name: str) -> bool:
        """Check if filter name is registered."""
        return name in self._by_name

    @property
    def names(self) -> frozenset[str]:
        """Get all registered filter names."""
        return frozenset(self._by_name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._by_name)


class FilterRegistryBuilder:
    """Mutable builder for FilterRegistry."""

    __slots__ = ("_by_name",)

    def __init__(self) -> None:
        self._by_name: dict[str, FilterFunc] = {}

    def register(self, name: str, func: FilterFunc, *, replace: bool = False) -> FilterRegistryBuilder:
        """Register a filter callable under name.

        Args:
            name: Name used in templates
            func: Callable taking the value and an optional argument
            replace: Allow overriding an existing registration

        Returns:
            Self for chaining

        Raises:
            ValueError: If name is already registered and replace is False
        """
        if not callable(func):
            msg = f"Filter '{name}' must be callable, got {type(func).__name__}"
            raise TypeError(msg)
        if name in self._by_name and not replace:
            msg = f"Filter '{name}' already registered"
            raise ValueError(msg)
        self._by_name[name] = func
        return self

    def build(self) -> FilterRegistry:
        """Build immutable registry from registered filters."""
        return FilterRegistry(dict(self._by_name))

    def __len__(self) -> int:
        return len(self._by_name)


# =============================================================================
# Built-in filters
# =============================================================================


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def escape(value: Any) -> SafeString:
    """HTML-escape value unless it is already a SafeString."""
    if isinstance(value, SafeString):
        return value
    return SafeString(escape_html(_text(value)))


def safe(value: Any) -> SafeString:
    """Mark value as safe so auto-escaping leaves it alone."""
    return SafeString(_text(value))


def lower(value: Any) -> str:
    return _text(value).lower()


def upper(value: Any) -> str:
    return _text(value).upper()


def capitalize(value: Any) -> str:
    return _text(value).capitalize()


def title(value: Any) -> str:
    return _text(value).title()


def trim(value: Any) -> str:
    return _text(value).strip()


def length(value: Any) -> int:
    if value is None:
        return 0
    if not isinstance(value, Sized):
        msg = f"object of type {type(value).__name__} has no length"
        raise TypeError(msg)
    return len(value)


def default(value: Any, fallback: Any = "") -> Any:
    """Return fallback when value is undefined, None or empty string."""
    if value is UNDEFINED or value is None or value == "":
        return fallback
    return value


def join(value: Any, separator: Any = ", ") -> str:
    if isinstance(value, str):
        return value
    return _text(separator).join(_text(item) for item in value)


def first(value: Any) -> Any:
    for item in value:
        return item
    return UNDEFINED


def last(value: Any) -> Any:
    items = list(value)
    return items[-1] if items else UNDEFINED


def truncate(value: Any, size: Any = 80) -> str:
    text = _text(value)
    limit = int(size)
    if limit < 0:
        msg = f"size must not be negative, got {limit}"
        raise ValueError(msg)
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def to_string(value: Any) -> str:
    return _text(value)


def to_int(value: Any) -> int:
    return int(value)


def striptags(value: Any) -> str:
    return strip_tags(_text(value))


BUILTIN_FILTERS: dict[str, FilterFunc] = {
    "escape": escape,
    "e": escape,
    "safe": safe,
    "lower": lower,
    "upper": upper,
    "capitalize": capitalize,
    "title": title,
    "trim": trim,
    "length": length,
    "default": default,
    "join": join,
    "first": first,
    "last": last,
    "truncate": truncate,
    "string": to_string,
    "int": to_int,
    "striptags": striptags,
}


def create_filters_with_defaults() -> FilterRegistryBuilder:
    """Create a builder pre-populated with the built-in filters.

    Use this to extend the default set with custom filters.
    """
    builder = FilterRegistryBuilder()
    for name, func in BUILTIN_FILTERS.items():
        builder.register(name, func)
    return builder


# Cached singleton, thread-safe since FilterRegistry is immutable
_DEFAULT_FILTERS: FilterRegistry | None = None


def create_default_filters() -> FilterRegistry:
    """Get the default filter registry (cached singleton)."""
    global _DEFAULT_FILTERS
    if _DEFAULT_FILTERS is None:
        _DEFAULT_FILTERS = create_filters_with_defaults().build()
    return _DEFAULT_FILTERS


__all__ = [
    "BUILTIN_FILTERS",
    "FilterFunc",
    "FilterRegistry",
    "FilterRegistryBuilder",
    "SafeString",
    "create_default_filters",
    "create_filters_with_defaults",
]
