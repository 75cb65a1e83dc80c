"""Block comment tag: ``{% comment %} ... {% endcomment %}``.

Everything up to the matching endcomment is skipped without being
rendered or evaluated. Tags inside must still be known names, and
block tags inside must be closed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution


class CommentTag:
    """Handler for the comment tag."""

    names: ClassVar[tuple[str, ...]] = ("comment",)
    markers: ClassVar[tuple[str, ...]] = ("endcomment",)
    end_names: ClassVar[tuple[str, ...]] = ("endcomment",)

    def render(self, args: str, execution: Execution, context: Context) -> str:
        execution.skip_until("endcomment")
        return ""
