"""Include tag: ``{% include "partials/header.html" %}``.

The argument is an expression, so the name may also come from a
variable. The included template is found through the including
template's locator, parsed with the same configuration and rendered
with the current context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from plantilla.context import UNDEFINED
from plantilla.errors import ExecutionError

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution


class IncludeTag:
    """Handler for the include tag."""

    names: ClassVar[tuple[str, ...]] = ("include",)
    markers: ClassVar[tuple[str, ...]] = ()
    end_names: ClassVar[tuple[str, ...]] = ()

    def render(self, args: str, execution: Execution, context: Context) -> str:
        if not args:
            msg = "'include' requires a template name"
            raise ExecutionError(msg)
        name = execution.evaluate(args)
        if name is UNDEFINED or name is None or name == "":
            msg = f"'include' name {args!r} evaluated to nothing"
            raise ExecutionError(msg)
        return execution.include(str(name))
