"""TagHandler protocol for extensible template tags.

Tags are the extension mechanism for control flow and utilities. A tag
handler is looked up by name in the TagRegistry each time a ``{% name %}``
node is rendered.

Control tags consume their own body through the Execution they are
handed: ``run_until`` renders nodes up to a marker, ``skip_until`` passes
over nodes without rendering them. A handler must leave the cursor on
the last marker it consumed; the engine steps past it afterwards.

Thread Safety:
Handlers must be stateless. All per-render state lives on the Execution
and the Context. Multiple threads may call the same handler instance
concurrently.

Example:
    >>> class UpperTag:
    ...     names = ("upper",)
    ...     markers = ("endupper",)
    ...     end_names = ("endupper",)
    ...
    ...     def render(self, args, execution, context):
    ...         body, _ = execution.run_until("endupper")
    ...         return body.upper()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution


@runtime_checkable
class TagHandler(Protocol):
    """Protocol for tag implementations.

    Attributes:
        names: Tag names this handler responds to, e.g. ("if",)
        markers: Handler-less marker names this tag uses as stops,
            e.g. ("elif", "else", "endif"). Registered together with
            the handler.
        end_names: Markers that close this tag's body. Used to track
            nesting depth while an enclosing tag skips over it. Empty
            for tags without a body.

    """

    names: ClassVar[tuple[str, ...]]
    markers: ClassVar[tuple[str, ...]]
    end_names: ClassVar[tuple[str, ...]]

    def render(self, args: str, execution: Execution, context: Context) -> str:
        """Render the tag.

        Args:
            args: Trimmed text after the tag name, verbatim
            execution: The running execution (cursor on this tag's node)
            context: Variable context of the current render

        Returns:
            Output text for the whole construct

        Raises:
            ExecutionError: To abort the render
        """
        ...


@runtime_checkable
class SkipAware(Protocol):
    """Optional hook for handlers that need to know they were skipped.

    Called by ``Execution.skip_until`` for every non-stop tag it passes
    over. Argument text is handed over unparsed and may be invalid.
    """

    def skip(self, args: str, execution: Execution) -> None:
        """Notification that this tag's node was skipped."""
        ...
