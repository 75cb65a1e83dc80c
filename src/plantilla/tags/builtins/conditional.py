"""Conditional tag: if / elif / else / endif.

Example:
{% if user.admin %}
  Admin
{% elif user.staff %}
  Staff
{% else %}
  Guest
{% endif %}

Exactly one branch is rendered. Conditions of branches after the taken
one are never evaluated; untaken branches are skipped without rendering.

Thread Safety:
Stateless handler. Safe for concurrent use across threads.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from plantilla.errors import ExecutionError

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution

_BRANCHES = ("elif", "else", "endif")


class IfTag:
    """Handler for the if tag."""

    names: ClassVar[tuple[str, ...]] = ("if",)
    markers: ClassVar[tuple[str, ...]] = _BRANCHES
    end_names: ClassVar[tuple[str, ...]] = ("endif",)

    def render(self, args: str, execution: Execution, context: Context) -> str:
        if not args:
            msg = "'if' requires a condition"
            raise ExecutionError(msg)

        if execution.test(args):
            return self._take_branch(execution)

        stop = execution.skip_until(*_BRANCHES)
        while True:
            match stop.name:
                case "endif":
                    return ""
                case "else":
                    output, _ = execution.run_until("endif")
                    return output
                case _:
                    if execution.test(stop.args, at=stop):
                        return self._take_branch(execution)
                    stop = execution.skip_until(*_BRANCHES)

    def _take_branch(self, execution: Execution) -> str:
        output, stop = execution.run_until(*_BRANCHES)
        if stop.name != "endif":
            execution.skip_until("endif")
        return output
