"""Template handle: the public unit of Plantilla.

A Template owns its name, source, configuration and locator. Parsing
turns the source into an immutable node tuple exactly once; executing
renders that tuple against a context through a fresh Execution.

Example:
    >>> tpl = from_string("greeting", "Hello {{ name }}!{# note #}")
    >>> tpl.execute({"name": "World"})
    'Hello World!'

Thread Safety:
After parse() the Template is read-only. Every execute() call gets its
own cursor, so one Template may be rendered from many threads at once.

"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from plantilla.config import TemplateConfig, get_template_config
from plantilla.errors import ParseError, ResolutionError
from plantilla.execution import Execution
from plantilla.lexer import Lexer
from plantilla.loaders import FileSystemLocator
from plantilla.utils.logger import get_logger

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.loaders import TemplateLocator
    from plantilla.nodes import TemplateNode

logger = get_logger(__name__)


class Template:
    """A named template, parsed once and executable many times.

    Attributes:
        name: Name used in error messages (e.g. the file name)
        source: Raw template source
        locator: Resolves names for ``include`` (optional)
        config: Configuration captured at construction

    """

    __slots__ = ("name", "source", "locator", "config", "_nodes", "_parsed")

    def __init__(
        self,
        name: str,
        source: str,
        *,
        locator: TemplateLocator | None = None,
        config: TemplateConfig | None = None,
    ) -> None:
        """Create an unparsed template.

        Raises:
            ParseError: If source is empty
        """
        if not source:
            raise ParseError("template has no content", source_file=name)
        self.name = name
        self.source = source
        self.locator = locator
        self.config = config or get_template_config()
        self._nodes: tuple[TemplateNode, ...] = ()
        self._parsed = False

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def nodes(self) -> tuple[TemplateNode, ...]:
        """Parsed nodes in source order (empty before parse())."""
        return self._nodes

    def parse(self) -> Template:
        """Parse the source into nodes. A second call is a no-op.

        Returns:
            self

        Raises:
            ParseError: On the first error; the template stays unparsed
        """
        if self._parsed:
            return self
        nodes = Lexer(self.source, source_file=self.name, config=self.config).tokenize()
        self._nodes = nodes
        self._parsed = True
        logger.debug("Parsed template %s into %d nodes", self.name, len(nodes))
        return self

    def execute(self, context: Context | Mapping[str, Any] | None = None) -> str:
        """Render the template.

        Args:
            context: Variables (a Context, any mapping, or None for empty)

        Returns:
            The complete output; nothing is returned if any node fails

        Raises:
            ParseError: If the template has not been parsed and fails to parse
            ExecutionError: On the first render error
        """
        self.parse()
        return Execution(self, context).render_all()

    def render(self, /, **variables: Any) -> str:
        """Render with keyword arguments as the context."""
        return self.execute(variables)

    def resolve(self, name: str) -> Template:
        """Load and parse another template through this template's locator.

        Raises:
            ResolutionError: No locator, or the name cannot be found
            ParseError: The located template is malformed
        """
        if self.locator is None:
            msg = f"Cannot resolve template '{name}' from '{self.name}': no template locator configured"
            raise ResolutionError(msg)
        source = self.locator(name)
        return from_string(name, source, locator=self.locator, config=self.config)

    def __repr__(self) -> str:
        state = f"{len(self._nodes)} nodes" if self._parsed else "unparsed"
        return f"<Template {self.name!r} {state}>"


def from_string(
    name: str,
    source: str,
    *,
    locator: TemplateLocator | None = None,
    config: TemplateConfig | None = None,
) -> Template:
    """Create and parse a template from a string.

    Raises:
        ParseError: Empty or malformed source
    """
    return Template(name, source, locator=locator, config=config).parse()


def from_file(
    path: str | Path,
    *,
    locator: TemplateLocator | None = None,
    config: TemplateConfig | None = None,
    encoding: str = "utf-8",
) -> Template:
    """Read and parse a template file.

    Relative paths are resolved against the working directory. Without an
    explicit locator, includes are resolved relative to the file's directory.

    Raises:
        ResolutionError: The file cannot be read
        ParseError: Empty or malformed source
    """
    file_path = Path(path)
    if not file_path.is_absolute():
        file_path = file_path.absolute()

    try:
        source = file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Could not read template file '{file_path}': {exc}"
        raise ResolutionError(msg) from exc

    if locator is None:
        locator = FileSystemLocator(file_path.parent, encoding=encoding)

    return from_string(file_path.name, source, locator=locator, config=config)


__all__ = ["Template", "from_file", "from_string"]
