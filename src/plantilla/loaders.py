"""Template locators.

A locator turns a template name into source text. Templates use their
locator to resolve ``include`` tags. Any callable ``(name) -> str`` that
raises ResolutionError on failure can serve as one.

Example:
    >>> locator = DictLocator({"header.html": "<h1>{{ title }}</h1>"})
    >>> locator("header.html")
    '<h1>{{ title }}</h1>'
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from plantilla.errors import ResolutionError
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TemplateLocator(Protocol):
    """Resolves a template name to its source text."""

    def __call__(self, name: str) -> str:
        """Return source text for name.

        Raises:
            ResolutionError: If the template cannot be found
        """
        ...


class FileSystemLocator:
    """Locate templates on disk relative to a base directory.

    Absolute names are read as-is.
    """

    __slots__ = ("base_dir", "encoding")

    def __init__(self, base_dir: str | Path, encoding: str = "utf-8") -> None:
        self.base_dir = Path(base_dir)
        self.encoding = encoding

    def path_for(self, name: str) -> Path:
        path = Path(name)
        if path.is_absolute():
            return path
        return self.base_dir / path

    def __call__(self, name: str) -> str:
        path = self.path_for(name)
        try:
            source = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"could not find the template '{path}': {exc}"
            raise ResolutionError(msg) from exc
        logger.debug("Located template %s", path)
        return source

    def __repr__(self) -> str:
        return f"FileSystemLocator({str(self.base_dir)!r})"


class DictLocator:
    """Locate templates in an in-memory mapping of name to source."""

    __slots__ = ("_sources",)

    def __init__(self, sources: Mapping[str, str]) -> None:
        self._sources = dict(sources)

    def __call__(self, name: str) -> str:
        try:
            return self._sources[name]
        except KeyError:
            msg = f"could not find the template '{name}'"
            raise ResolutionError(msg) from None

    def __contains__(self, name: str) -> bool:
        return name in self._sources


__all__ = [
    "DictLocator",
    "FileSystemLocator",
    "TemplateLocator",
]
