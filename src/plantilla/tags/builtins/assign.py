"""Assignment tag: ``{% set name = expression %}``.

Binds in the innermost context layer, so a ``set`` inside a loop body
lasts for that iteration only. Renders nothing.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

from plantilla.errors import ExecutionError

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution

_SET_PATTERN = re.compile(r"^(?P<name>[A-Za-z_]\w*)\s*=\s*(?P<value>.+)$", re.DOTALL)


class SetTag:
    """Handler for the set tag."""

    names: ClassVar[tuple[str, ...]] = ("set",)
    markers: ClassVar[tuple[str, ...]] = ()
    end_names: ClassVar[tuple[str, ...]] = ()

    def render(self, args: str, execution: Execution, context: Context) -> str:
        match = _SET_PATTERN.match(args)
        if match is None:
            msg = f"invalid 'set' arguments {args!r}, expected 'name = expression'"
            raise ExecutionError(msg)
        context.set(match.group("name"), execution.evaluate(match.group("value")))
        return ""
