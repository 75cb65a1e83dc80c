"""Loop tag: for / empty / endfor.

Example:
{% for item in items %}
  {{ loop.index }}. {{ item }}
{% empty %}
  Nothing here.
{% endfor %}

{% for key, value in settings %}{{ key }}={{ value }} {% endfor %}

The body is replayed once per item by resetting the cursor to the ``for``
node. Each iteration runs in its own context layer holding the loop
variables and ``loop``.

Thread Safety:
Stateless handler. Safe for concurrent use across threads.

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from plantilla.context import UNDEFINED
from plantilla.errors import ExecutionError

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution

_FOR_PATTERN = re.compile(
    r"^(?P<targets>[A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)\s+in\s+(?P<iterable>.+)$",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class LoopInfo:
    """The ``loop`` variable available inside a for body."""

    index0: int
    length: int

    @property
    def index(self) -> int:
        return self.index0 + 1

    @property
    def revindex(self) -> int:
        return self.length - self.index0

    @property
    def first(self) -> bool:
        return self.index0 == 0

    @property
    def last(self) -> bool:
        return self.index0 == self.length - 1


def parse_for_args(args: str) -> tuple[tuple[str, ...], str]:
    """Split ``a, b in expr`` into target names and iterable text.

    Raises:
        ExecutionError: Malformed arguments
    """
    match = _FOR_PATTERN.match(args.strip())
    if match is None:
        msg = f"invalid 'for' arguments {args!r}, expected 'name in expression'"
        raise ExecutionError(msg)
    targets = tuple(part.strip() for part in match.group("targets").split(","))
    return targets, match.group("iterable")


def _bind(targets: tuple[str, ...], item: Any) -> dict[str, Any]:
    if len(targets) == 1:
        return {targets[0]: item}
    try:
        values = tuple(item)
    except TypeError as exc:
        msg = f"cannot unpack {type(item).__name__} into {', '.join(targets)}"
        raise ExecutionError(msg) from exc
    if len(values) != len(targets):
        msg = f"cannot unpack {len(values)} values into {len(targets)} names"
        raise ExecutionError(msg)
    return dict(zip(targets, values, strict=True))


class ForTag:
    """Handler for the for tag."""

    names: ClassVar[tuple[str, ...]] = ("for",)
    markers: ClassVar[tuple[str, ...]] = ("empty", "endfor")
    end_names: ClassVar[tuple[str, ...]] = ("endfor",)

    def render(self, args: str, execution: Execution, context: Context) -> str:
        targets, iterable_text = parse_for_args(args)
        items = self._items(execution.evaluate(iterable_text), targets)

        if not items:
            stop = execution.skip_until("empty", "endfor")
            if stop.name == "empty":
                output, _ = execution.run_until("endfor")
                return output
            return ""

        start = execution.cursor
        parts: list[str] = []
        length = len(items)
        for index0, item in enumerate(items):
            execution.cursor = start
            bindings = {"loop": LoopInfo(index0, length), **_bind(targets, item)}
            with context.scope(**bindings):
                output, stop = execution.run_until("empty", "endfor")
            parts.append(output)

        if stop.name == "empty":
            execution.skip_until("endfor")
        return "".join(parts)

    def _items(self, value: Any, targets: tuple[str, ...]) -> list[Any]:
        if value is UNDEFINED or value is None:
            return []
        if isinstance(value, Mapping) and len(targets) == 2:
            return list(value.items())
        if not isinstance(value, Iterable):
            msg = f"'{type(value).__name__}' object is not iterable"
            raise ExecutionError(msg)
        return list(value)
