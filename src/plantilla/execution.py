"""Cursor-based execution engine.

An Execution walks the node tuple of a parsed template with a single
integer cursor. Plain nodes are rendered in order; tag handlers receive
the Execution and move the cursor themselves to implement branches and
loops:

- ``run_until(*names)`` renders the nodes after the current one until a
  tag named in ``names`` and returns the output plus that stop node.
- ``skip_until(*names)`` passes over nodes without rendering them and
  returns the stop node.

Both leave the cursor on the stop node. Once a handler returns, the
driving loop steps past whatever node the cursor is on, so a control tag
that ended on its ``endif`` resumes rendering right after it.

Nested constructs inside a skipped range are tracked with a stack of
expected closing markers, so an inner ``if ... endif`` in an untaken
branch does not end the outer ``if``.

Thread Safety:
One Execution per render call. The cursor never lives on the Template,
so a parsed Template can be rendered from many threads at once.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from plantilla.context import Context
from plantilla.errors import ExecutionError, ExpressionSyntaxError, PlantillaError
from plantilla.expressions import Expression, compile_expression
from plantilla.nodes import ContentNode, FilterNode, MarkerNode, TagNode
from plantilla.utils.logger import get_logger

if TYPE_CHECKING:
    from plantilla.nodes import Node, TemplateNode
    from plantilla.template import Template

logger = get_logger(__name__)


class Execution:
    """State of one render of one template.

    Attributes:
        template: The template being rendered
        nodes: The template's node tuple
        cursor: Index of the node currently being rendered
        context: Variable context shared by every node of this render
        depth: Include nesting level (0 for the outermost template)
    """

    __slots__ = ("template", "nodes", "cursor", "context", "depth", "_tags", "_filters", "_strict")

    def __init__(
        self,
        template: Template,
        context: Context | Mapping[str, Any] | None = None,
        *,
        depth: int = 0,
    ) -> None:
        config = template.config
        self.template = template
        self.nodes: tuple[TemplateNode, ...] = template.nodes
        self.cursor = 0
        self.context = Context.coerce(context)
        self.depth = depth
        self._tags = config.get_tag_registry()
        self._filters = config.get_filter_registry()
        self._strict = config.strict_undefined

    @property
    def current(self) -> TemplateNode | None:
        """Node under the cursor, or None past the end."""
        if self.cursor < len(self.nodes):
            return self.nodes[self.cursor]
        return None

    # =========================================================================
    # Driving loop and cursor primitives
    # =========================================================================

    def render_all(self) -> str:
        """Render every node from the cursor to the end.

        Raises:
            ExecutionError: First node failure, located at that node
        """
        parts: list[str] = []
        nodes = self.nodes
        while self.cursor < len(nodes):
            parts.append(self.render_node(nodes[self.cursor]))
            self.cursor += 1
        return "".join(parts)

    def run_until(self, *stop_names: str) -> tuple[str, TagNode]:
        """Render the nodes after the current one up to a stop tag.

        The stop tag is not rendered; the cursor is left on it.

        Returns:
            (rendered output, stop node)

        Raises:
            ExecutionError: No stop tag before the end of the template
        """
        parts: list[str] = []
        nodes = self.nodes
        self.cursor += 1
        while self.cursor < len(nodes):
            node = nodes[self.cursor]
            if isinstance(node, TagNode) and node.name in stop_names:
                return "".join(parts), node
            parts.append(self.render_node(node))
            self.cursor += 1
        raise self._missing_end(stop_names)

    def skip_until(self, *stop_names: str) -> TagNode:
        """Advance past nodes without rendering them, up to a stop tag.

        Tags passed over that have a ``skip`` hook are notified with their
        raw argument text. Stop names only match outside nested constructs.

        Returns:
            The stop node (the cursor is left on it)

        Raises:
            ExecutionError: No stop tag before the end of the template
        """
        nodes = self.nodes
        pending: list[tuple[str, ...]] = []
        self.cursor += 1
        while self.cursor < len(nodes):
            node = nodes[self.cursor]
            if isinstance(node, TagNode):
                if pending and node.name in pending[-1]:
                    pending.pop()
                elif not pending and node.name in stop_names:
                    return node
                elif not isinstance(node, MarkerNode):
                    self._notify_skip(node)
                    end_names = self._tags.end_names_for(node.name)
                    if end_names:
                        pending.append(end_names)
            self.cursor += 1
        raise self._missing_end(stop_names)

    def render_node(self, node: TemplateNode) -> str:
        """Render a single node, attaching its location to any error."""
        try:
            return self._dispatch(node)
        except ExecutionError as exc:
            if not exc.located:
                self._locate(exc, node)
            raise
        except PlantillaError as exc:
            raise self._locate(ExecutionError(str(exc)), node) from exc
        except Exception as exc:
            err = ExecutionError(f"{type(exc).__name__}: {exc}")
            raise self._locate(err, node) from exc

    def _dispatch(self, node: TemplateNode) -> str:
        match node:
            case ContentNode(text=text):
                return text
            case FilterNode(expression=expression):
                return expression.render(self.context, strict_undefined=self._strict)
            case MarkerNode(name=name):
                msg = (
                    f"unhandled placeholder '{name}': no enclosing tag consumed it "
                    "(for example 'endif' without 'if')"
                )
                raise ExecutionError(msg)
            case TagNode(name=name, args=args):
                handler = self._tags.get(name)
                if handler is None:
                    msg = f"Tag '{name}' is not registered"
                    raise ExecutionError(msg)
                return handler.render(args, self, self.context)
        msg = f"Unknown node type {type(node).__name__}"
        raise ExecutionError(msg)

    def _notify_skip(self, node: TagNode) -> None:
        handler = self._tags.get(node.name)
        hook = getattr(handler, "skip", None)
        if hook is None:
            return
        logger.debug("Skip hook for '%s' at %s", node.name, node.location)
        try:
            hook(node.args, self)
        except ExecutionError as exc:
            if not exc.located:
                self._locate(exc, node)
            raise

    def _missing_end(self, stop_names: tuple[str, ...]) -> ExecutionError:
        names = ", ".join(stop_names)
        return ExecutionError(f"no end-node found (possible nodes: {names})")

    def _locate(self, exc: ExecutionError, node: Node) -> ExecutionError:
        return exc.locate(node.lineno, node.col_offset, self.template.name, node.raw)

    # =========================================================================
    # Helpers for tag handlers
    # =========================================================================

    def compile(self, text: str) -> Expression:
        """Compile tag argument text with the template's filters.

        Raises:
            ExecutionError: Malformed expression
        """
        try:
            return compile_expression(text, self._filters)
        except ExpressionSyntaxError as exc:
            raise ExecutionError(exc.message) from exc

    def evaluate(self, expression: Expression | str) -> Any:
        """Evaluate an expression (or expression text) in this render's context."""
        if isinstance(expression, str):
            expression = self.compile(expression)
        return expression.evaluate(self.context, strict_undefined=self._strict)

    def test(self, text: str, *, at: TagNode | None = None) -> bool:
        """Evaluate text as a condition.

        Args:
            text: Expression text
            at: Node to blame on failure (defaults to the rendering tag)
        """
        try:
            return bool(self.evaluate(text))
        except ExecutionError as exc:
            if at is not None and not exc.located:
                self._locate(exc, at)
            raise

    def include(self, name: str) -> str:
        """Render another template, found by the locator, with this context.

        Raises:
            ExecutionError: Include depth exceeded or the template failed
        """
        limit = self.template.config.max_include_depth
        if self.depth >= limit:
            msg = f"Include depth limit ({limit}) exceeded while including '{name}'"
            raise ExecutionError(msg)
        included = self.template.resolve(name)
        logger.debug("Including '%s' from '%s' at depth %d", name, self.template.name, self.depth + 1)
        return Execution(included, self.context, depth=self.depth + 1).render_all()

    def __repr__(self) -> str:
        return f"<Execution {self.template.name!r} cursor={self.cursor}/{len(self.nodes)}>"


__all__ = ["Execution"]
