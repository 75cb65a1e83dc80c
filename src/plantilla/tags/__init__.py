"""Tag system for Plantilla.

Tags are written ``{% name args %}`` and resolved by name when a template
is parsed. Control tags such as ``if`` and ``for`` consume their own
bodies by moving the execution cursor.

Key components:
- TagHandler: Protocol for custom tag implementations
- SkipAware: Optional protocol for handlers notified when skipped
- TagRegistry: Handler and marker lookup
- tag: Decorator for building handlers from functions or classes

Thread Safety:
- Registry is immutable after creation
- Handlers must be stateless

"""

from __future__ import annotations

from plantilla.tags.decorator import tag
from plantilla.tags.protocol import SkipAware, TagHandler
from plantilla.tags.registry import (
    TagRegistry,
    TagRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
)

__all__ = [
    "SkipAware",
    "TagHandler",
    "TagRegistry",
    "TagRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "tag",
]
