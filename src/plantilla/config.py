"""ContextVar-based template configuration for Plantilla.

Provides thread-local configuration using Python's ContextVars (PEP 567).
A Template captures its config once, at construction; every later parse
and render of that template uses the captured value.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Per template
    tpl = from_string("page", source, config=TemplateConfig(autoescape=False))

    # Or as the default for every template created in this context
    with template_config_context(TemplateConfig(strict_undefined=True)):
        tpl = from_string("page", source)

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from plantilla.filters import FilterRegistry
    from plantilla.tags.registry import TagRegistry


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Immutable template configuration.

    Attributes:
        autoescape: Append the ``escape`` filter to every ``{{ }}`` pipeline
        tag_registry: Registry used to resolve tag names (defaults if None)
        filter_registry: Registry used to resolve filter names (defaults if None)
        strict_undefined: Raise UndefinedError instead of rendering ''
        max_include_depth: Maximum nesting of ``include`` tags per render

    """

    autoescape: bool = True
    tag_registry: TagRegistry | None = None
    filter_registry: FilterRegistry | None = None
    strict_undefined: bool = False
    max_include_depth: int = 32

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> TemplateConfig:
        """Create TemplateConfig from dictionary.

        Only includes keys that are valid TemplateConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = TemplateConfig.from_dict({
            ...     "autoescape": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.autoescape
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)

    def get_tag_registry(self) -> TagRegistry:
        """Configured tag registry, falling back to the built-in tags."""
        if self.tag_registry is not None:
            return self.tag_registry
        from plantilla.tags.registry import create_default_registry

        return create_default_registry()

    def get_filter_registry(self) -> FilterRegistry:
        """Configured filter registry, falling back to the built-in filters."""
        if self.filter_registry is not None:
            return self.filter_registry
        from plantilla.filters import create_default_filters

        return create_default_filters()


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: TemplateConfig = TemplateConfig()

_template_config: ContextVar[TemplateConfig] = ContextVar(
    "template_config",
    default=_DEFAULT_CONFIG,
)


def get_template_config() -> TemplateConfig:
    """Get current template configuration (thread-local)."""
    return _template_config.get()


def set_template_config(config: TemplateConfig) -> None:
    """Set template configuration for current context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _template_config.set(config)


def reset_template_config() -> None:
    """Reset to the module-level default configuration."""
    _template_config.set(_DEFAULT_CONFIG)


@contextmanager
def template_config_context(config: TemplateConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with template_config_context(TemplateConfig(autoescape=False)):
        ...     get_template_config().autoescape
        False

    """
    previous = _template_config.get()
    _template_config.set(config)
    try:
        yield
    finally:
        _template_config.set(previous)


__all__ = [
    "TemplateConfig",
    "get_template_config",
    "reset_template_config",
    "set_template_config",
    "template_config_context",
]
