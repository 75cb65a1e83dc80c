"""Layered variable context for template execution.

A Context is a stack of dicts. Lookups search from the innermost layer
outwards; control tags push a layer for loop or branch-local bindings
and pop it again when their body is done.

Example:
    >>> ctx = Context({"user": {"name": "Ada"}})
    >>> ctx.lookup("user.name")
    'Ada'
    >>> with ctx.scope(user={"name": "Grace"}):
    ...     ctx.lookup("user.name")
    'Grace'

Thread Safety:
    A Context belongs to a single render call. Do not share one instance
    between concurrent renders.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any


class _Undefined:
    """Sentinel for a variable or attribute that could not be resolved.

    Falsy, renders as the empty string and compares equal only to itself.
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __len__(self) -> int:
        return 0


UNDEFINED: Any = _Undefined()


def resolve_attribute(obj: Any, name: str) -> Any:
    """Resolve one segment of a dotted lookup.

    Tries a mapping key, then an attribute, then an integer index for
    all-digit segments.

    Returns:
        The resolved value, or UNDEFINED
    """
    if obj is UNDEFINED or obj is None:
        return UNDEFINED

    if isinstance(obj, Mapping):
        if name in obj:
            return obj[name]
    elif not name.startswith("_"):
        try:
            return getattr(obj, name)
        except AttributeError:
            pass

    if name.isdigit():
        try:
            return obj[int(name)]
        except (IndexError, KeyError, TypeError):
            return UNDEFINED

    return UNDEFINED


class Context:
    """Stack of variable bindings passed into every render call."""

    __slots__ = ("_layers",)

    def __init__(self, data: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        base: dict[str, Any] = dict(data) if data else {}
        base.update(kwargs)
        self._layers: list[dict[str, Any]] = [base]

    @classmethod
    def coerce(cls, obj: Context | Mapping[str, Any] | None) -> Context:
        """Turn None, a mapping, or an existing Context into a Context.

        An existing Context is returned as-is so bindings made by tags
        stay visible to the caller's object.
        """
        if obj is None:
            return cls()
        if isinstance(obj, Context):
            return obj
        if isinstance(obj, Mapping):
            return cls(obj)
        msg = f"Context must be a mapping or Context, got {type(obj).__name__}"
        raise TypeError(msg)

    def __getitem__(self, name: str) -> Any:
        for layer in reversed(self._layers):
            if name in layer:
                return layer[name]
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(name in layer for layer in self._layers)

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def set(self, name: str, value: Any) -> None:
        """Bind name in the innermost layer."""
        self._layers[-1][name] = value

    def lookup(self, path: str) -> Any:
        """Resolve a dotted path like ``user.address.city``.

        Returns:
            The value, or UNDEFINED if any segment is missing
        """
        head, *rest = path.split(".")
        value = self.get(head, UNDEFINED)
        for part in rest:
            value = resolve_attribute(value, part)
            if value is UNDEFINED:
                break
        return value

    @contextmanager
    def scope(self, /, **bindings: Any) -> Iterator[Context]:
        """Push a layer with the given bindings for the duration of a block.

        The layer is popped even if the block raises.
        """
        self._layers.append(dict(bindings))
        try:
            yield self
        finally:
            self._layers.pop()

    @property
    def depth(self) -> int:
        """Number of layers currently on the stack."""
        return len(self._layers)

    def flatten(self) -> dict[str, Any]:
        """Merge all layers into a single dict, inner bindings winning."""
        merged: dict[str, Any] = {}
        for layer in self._layers:
            merged.update(layer)
        return merged

    def __repr__(self) -> str:
        return f"Context({self.flatten()!r})"


__all__ = [
    "UNDEFINED",
    "Context",
    "resolve_attribute",
]
