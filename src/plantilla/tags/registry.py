"""Tag registry for handler lookup and registration.

The registry maps tag names to handlers and records marker names: tags
with no handler that only delimit another tag's body. Names are
resolved when a template is parsed, so unknown tags fail early.

Thread Safety:
TagRegistry is immutable after creation. Safe to share.
Use TagRegistryBuilder for mutable construction.

Example:
    >>> builder = create_registry_with_defaults()
    >>> builder.register(UpperTag())
    >>> registry = builder.build()
    >>> registry.get("upper")
    <UpperTag ...>
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plantilla.tags.protocol import TagHandler


class TagRegistry:
    """Immutable registry of tag handlers and marker names.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_handlers", "_by_name", "_markers")

    def __init__(
        self,
        handlers: tuple[TagHandler, ...],
        by_name: dict[str, TagHandler],
        markers: frozenset[str],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use TagRegistryBuilder to create instances.
        """
        self._handlers = handlers
        self._by_name = by_name
        self._markers = markers

    def get(self, name: str) -> TagHandler | None:
        """Get handler for tag name.

        Returns:
            Handler if registered, None for markers and unknown names
        """
        return self._by_name.get(name)

    def has(self, name: str) -> bool:
        """Check if name is registered, as a handler or as a marker."""
        return name in self._by_name or name in self._markers

    def is_marker(self, name: str) -> bool:
        """Check if name is a handler-less marker."""
        return name in self._markers

    def end_names_for(self, name: str) -> tuple[str, ...]:
        """Closing markers of the tag registered under name, if any."""
        handler = self._by_name.get(name)
        if handler is None:
            return ()
        return tuple(getattr(handler, "end_names", ()))

    @property
    def names(self) -> frozenset[str]:
        """Get all registered handler names."""
        return frozenset(self._by_name.keys())

    @property
    def markers(self) -> frozenset[str]:
        """Get all registered marker names."""
        return self._markers

    @property
    def handlers(self) -> tuple[TagHandler, ...]:
        """Get all registered handlers."""
        return self._handlers

    def __contains__(self, name: str) -> bool:
        """Support 'name in registry' syntax."""
        return self.has(name)

    def __len__(self) -> int:
        """Number of registered handler names."""
        return len(self._by_name)


class TagRegistryBuilder:
    """Mutable builder for TagRegistry.

    Example:
        >>> builder = TagRegistryBuilder()
        >>> builder.register(IfTag()).register_marker("fi")
        >>> registry = builder.build()
    """

    __slots__ = ("_handlers", "_by_name", "_markers")

    def __init__(self) -> None:
        """Initialize empty builder."""
        self._handlers: list[TagHandler] = []
        self._by_name: dict[str, TagHandler] = {}
        self._markers: set[str] = set()

    def register(self, handler: TagHandler) -> TagRegistryBuilder:
        """Register a tag handler and the markers it declares.

        Args:
            handler: Handler implementing TagHandler protocol

        Returns:
            Self for chaining

        Raises:
            TypeError: If handler lacks names or a render method
            ValueError: If a name conflicts with an existing registration
        """
        if not hasattr(handler, "names"):
            msg = f"Handler {type(handler).__name__} missing 'names' attribute"
            raise TypeError(msg)

        if not callable(getattr(handler, "render", None)):
            msg = f"Handler {type(handler).__name__} missing 'render' method"
            raise TypeError(msg)

        for name in handler.names:
            if name in self._by_name:
                existing = self._by_name[name]
                msg = f"Tag '{name}' already registered by {type(existing).__name__}"
                raise ValueError(msg)
            if name in self._markers:
                msg = f"Tag '{name}' already registered as a marker"
                raise ValueError(msg)
            self._by_name[name] = handler

        self.register_marker(*getattr(handler, "markers", ()))
        self._handlers.append(handler)
        return self

    def register_all(self, handlers: list[TagHandler]) -> TagRegistryBuilder:
        """Register multiple handlers."""
        for handler in handlers:
            self.register(handler)
        return self

    def register_marker(self, *names: str) -> TagRegistryBuilder:
        """Register handler-less marker names.

        Markers may be shared between tags; registering one twice is fine.

        Raises:
            ValueError: If a name is already a handler name
        """
        for name in names:
            if name in self._by_name:
                msg = f"Marker '{name}' already registered as a tag"
                raise ValueError(msg)
            self._markers.add(name)
        return self

    def build(self) -> TagRegistry:
        """Build immutable registry from registered handlers."""
        return TagRegistry(
            handlers=tuple(self._handlers),
            by_name=dict(self._by_name),
            markers=frozenset(self._markers),
        )

    def __len__(self) -> int:
        """Number of registered handlers."""
        return len(self._handlers)


def create_registry_with_defaults() -> TagRegistryBuilder:
    """Create a builder pre-populated with the built-in tags.

    Use this to extend the default set with custom tags:

        >>> builder = create_registry_with_defaults()
        >>> builder.register(MyCustomTag())
        >>> registry = builder.build()

    Returns:
        TagRegistryBuilder with defaults already registered
    """
    from plantilla.tags.builtins import BUILTIN_TAGS

    builder = TagRegistryBuilder()
    for handler_class in BUILTIN_TAGS:
        builder.register(handler_class())
    return builder


# Cached singleton, thread-safe since TagRegistry is immutable
_DEFAULT_REGISTRY: TagRegistry | None = None


def create_default_registry() -> TagRegistry:
    """Get the default tag registry (cached singleton).

    Returns:
        Registry with the built-in tags:
        - if / elif / else / endif
        - for / empty / endfor
        - set
        - include
        - comment / endcomment

    Thread Safety:
        Returns a cached immutable registry. Safe for concurrent access.
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry_with_defaults().build()
    return _DEFAULT_REGISTRY
