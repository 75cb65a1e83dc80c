"""Exception classes for Plantilla.

Provides standardized exceptions for error handling throughout Plantilla.
Parse and execution errors carry the template name and the line/column
of the offending construct.
"""

from __future__ import annotations


def _format_location(
    source_file: str | None,
    lineno: int | None,
    col_offset: int | None,
) -> str:
    location = ""
    if source_file:
        location = f"{source_file}:"
    if lineno is not None:
        location += f"{lineno}:"
        if col_offset is not None:
            location += f"{col_offset}:"
    if location:
        location = location.rstrip(":") + " "
    return location


class PlantillaError(Exception):
    """Base exception for all Plantilla errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(PlantillaError):
    """Error while turning template source into nodes.

    Raised for unterminated regions, unknown open commands, empty
    tags or filters, unknown tag names and malformed expressions.
    A template that raised a ParseError is never marked as parsed.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where the offending construct starts
            col_offset: Column where the offending construct starts
            source_file: Template name (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = _format_location(source_file, lineno, col_offset)
        super().__init__(f"{location}{message}")


class ExpressionSyntaxError(ParseError):
    """Malformed expression or filter pipeline.

    Raised by the expression compiler. ``col_offset`` is the character
    offset inside the expression text; the lexer re-raises the error as
    a plain ParseError located at the enclosing ``{{`` or ``{%``.
    """

    def __init__(self, message: str, expression: str, position: int | None = None) -> None:
        self.expression = expression
        self.position = position
        detail = f"{message} in expression {expression!r}"
        if position is not None:
            detail += f" (at offset {position})"
        super().__init__(detail)


class ExecutionError(PlantillaError):
    """Error while rendering a parsed template.

    Carries the location and the raw text of the node being rendered.
    The first ExecutionError aborts the whole render; no partial output
    is returned.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
        raw: str | None = None,
    ) -> None:
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        self.raw = raw

        location = _format_location(source_file, lineno, col_offset)
        node = f"({raw}) " if raw is not None else ""
        super().__init__(f"{location}{node}{message}")

    @property
    def located(self) -> bool:
        """True once the error has been attached to a node."""
        return self.lineno is not None

    def locate(
        self,
        lineno: int,
        col_offset: int,
        source_file: str | None,
        raw: str,
    ) -> ExecutionError:
        """Attach node location to an error raised without one.

        Returns self so callers can ``raise err.locate(...)``.
        """
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file
        self.raw = raw
        location = _format_location(source_file, lineno, col_offset)
        self.args = (f"{location}({raw}) {self.message}",)
        return self


class UndefinedError(ExecutionError):
    """Variable lookup failed while ``strict_undefined`` is enabled."""

    pass


class FilterError(ExecutionError):
    """A filter raised while transforming a value."""

    def __init__(self, filter_name: str, message: str) -> None:
        self.filter_name = filter_name
        super().__init__(f"Filter '{filter_name}': {message}")


class ResolutionError(PlantillaError, OSError):
    """Template or file could not be located.

    Surfaced as an I/O-style error without line/column information.
    """

    pass
