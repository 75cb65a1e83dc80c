"""@tag decorator for reducing tag handler boilerplate.

Works with both functions (simple tags) and classes (control tags).

Example (function):
    >>> @tag("now")
    ... def render_now(args: str, execution: Execution, context: Context) -> str:
    ...     return datetime.now().strftime(args.strip('"') or "%Y-%m-%d")

Example (class):
    >>> @tag("upper", markers=("endupper",), end_names=("endupper",))
    ... class UpperTag:
    ...     def render(self, args, execution, context):
    ...         body, _ = execution.run_until("endupper")
    ...         return body.upper()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.execution import Execution

RenderFunc = Callable[[str, "Execution", "Context"], str]


def tag(
    *names: str,
    markers: tuple[str, ...] = (),
    end_names: tuple[str, ...] = (),
) -> Callable[[RenderFunc | type], type]:
    """Decorator to create tag handlers with minimal boilerplate.

    Args:
        *names: Tag names (e.g., "now", "upper")
        markers: Marker names the tag uses as stops
        end_names: Markers that close the tag's body

    Returns:
        A decorator producing a handler class. Register an instance of it.
    """
    if not names:
        msg = "At least one tag name must be provided"
        raise ValueError(msg)

    def decorator(func_or_class: RenderFunc | type) -> type:
        if isinstance(func_or_class, type):
            func_or_class.names = names
            func_or_class.markers = markers
            func_or_class.end_names = end_names
            return func_or_class

        render_func = func_or_class
        _names = names
        _markers = markers
        _end_names = end_names

        class GeneratedTag:
            names = _names
            markers = _markers
            end_names = _end_names

            def render(self, args: str, execution: Execution, context: Context) -> str:
                return render_func(args, execution, context)

        func_name = getattr(render_func, "__name__", "anonymous")
        func_qualname = getattr(render_func, "__qualname__", "anonymous")
        GeneratedTag.__name__ = f"{func_name}_tag"
        GeneratedTag.__qualname__ = f"{func_qualname}_tag"
        return GeneratedTag

    return decorator
