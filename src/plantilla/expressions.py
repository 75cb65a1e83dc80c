"""Expression compiler and evaluator.

Compiles the text inside ``{{ ... }}`` and the arguments of expression-taking
tags (``if``, ``elif``, ``for``, ``set``) into an immutable tree that can be
evaluated against a Context any number of times.

Grammar:
    expression  := or_expr
    or_expr     := and_expr ("or" and_expr)*
    and_expr    := not_expr ("and" not_expr)*
    not_expr    := "not" not_expr | comparison
    comparison  := pipeline (COMPARE_OP pipeline)?
    pipeline    := primary ("|" NAME (":" primary)?)*
    primary     := STRING | NUMBER | "true" | "false" | "none"
                 | PATH | "(" expression ")"

Example:
    >>> expr = compile_expression('name|lower == "florian"')
    >>> expr.evaluate(Context(name="Florian"))
    True

Thread Safety:
Compiled expressions are frozen and safe to share across threads.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NoReturn

from plantilla.context import UNDEFINED
from plantilla.errors import ExecutionError, ExpressionSyntaxError, FilterError, PlantillaError, UndefinedError
from plantilla.filters import create_default_filters

if TYPE_CHECKING:
    from plantilla.context import Context
    from plantilla.filters import FilterFunc, FilterRegistry


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<path>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z0-9_]+)*)
  | (?P<op>==|!=|<=|>=|<|>|\||:|\(|\))
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "'": "'", "\\": "\\"}

_KEYWORD_LITERALS: dict[str, Any] = {
    "true": True,
    "True": True,
    "false": False,
    "False": False,
    "none": None,
    "None": None,
}

_COMPARE_OPS = frozenset(("==", "!=", "<", "<=", ">", ">=", "in", "not in"))
_RESERVED = frozenset(("and", "or", "not", "in"))


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    value: str
    pos: int


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_ESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_PATTERN.match(source, pos)
        if match is None:
            raise ExpressionSyntaxError(f"unexpected character {source[pos]!r}", source, pos)
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(_Token(kind, match.group(), pos))
        pos = match.end()
    tokens.append(_Token("end", "", len(source)))
    return tokens


# =============================================================================
# Expression tree
# =============================================================================


@dataclass(frozen=True, slots=True)
class Literal:
    """Constant string, number, boolean or none."""

    value: Any

    def eval(self, context: Context, strict: bool) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Variable:
    """Dotted lookup against the context."""

    path: str

    def eval(self, context: Context, strict: bool) -> Any:
        value = context.lookup(self.path)
        if value is UNDEFINED and strict:
            raise UndefinedError(f"'{self.path}' is undefined")
        return value


@dataclass(frozen=True, slots=True)
class FilterCall:
    """One stage of a filter pipeline."""

    name: str
    func: FilterFunc
    arg: ExprNode | None = None

    def apply(self, value: Any, context: Context, strict: bool) -> Any:
        try:
            if self.arg is None:
                return self.func(value)
            return self.func(value, self.arg.eval(context, strict))
        except PlantillaError:
            raise
        except Exception as exc:
            raise FilterError(self.name, str(exc)) from exc


@dataclass(frozen=True, slots=True)
class Pipeline:
    """A value piped through one or more filters."""

    base: ExprNode
    filters: tuple[FilterCall, ...]

    def eval(self, context: Context, strict: bool) -> Any:
        value = self.base.eval(context, strict)
        for call in self.filters:
            value = call.apply(value, context, strict)
        return value


@dataclass(frozen=True, slots=True)
class Compare:
    """Binary comparison or membership test."""

    op: str
    left: ExprNode
    right: ExprNode

    def eval(self, context: Context, strict: bool) -> Any:
        left = self.left.eval(context, strict)
        right = self.right.eval(context, strict)
        try:
            match self.op:
                case "==":
                    return left == right
                case "!=":
                    return left != right
                case "<":
                    return left < right
                case "<=":
                    return left <= right
                case ">":
                    return left > right
                case ">=":
                    return left >= right
                case "in":
                    return left in right
                case "not in":
                    return left not in right
        except TypeError as exc:
            msg = f"cannot evaluate {left!r} {self.op} {right!r}: {exc}"
            raise ExecutionError(msg) from exc
        msg = f"unknown comparison operator {self.op!r}"
        raise ExecutionError(msg)


@dataclass(frozen=True, slots=True)
class BoolOp:
    """Short-circuit ``and`` / ``or``."""

    op: str
    operands: tuple[ExprNode, ...]

    def eval(self, context: Context, strict: bool) -> Any:
        if self.op == "and":
            value: Any = True
            for operand in self.operands:
                value = operand.eval(context, strict)
                if not value:
                    return value
            return value
        value = False
        for operand in self.operands:
            value = operand.eval(context, strict)
            if value:
                return value
        return value


@dataclass(frozen=True, slots=True)
class Not:
    operand: ExprNode

    def eval(self, context: Context, strict: bool) -> Any:
        return not self.operand.eval(context, strict)


ExprNode = Literal | Variable | Pipeline | Compare | BoolOp | Not


@dataclass(frozen=True, slots=True)
class Expression:
    """A compiled expression.

    Attributes:
        source: The trimmed expression text
        root: Root of the expression tree
    """

    source: str
    root: ExprNode

    def evaluate(self, context: Context, *, strict_undefined: bool = False) -> Any:
        """Evaluate against context and return the raw value."""
        return self.root.eval(context, strict_undefined)

    def render(self, context: Context, *, strict_undefined: bool = False) -> str:
        """Evaluate and convert to output text; None renders as ''."""
        value = self.evaluate(context, strict_undefined=strict_undefined)
        if value is None or value is UNDEFINED:
            return ""
        return str(value)

    @property
    def filters(self) -> tuple[str, ...]:
        """Names of the filters in the outermost pipeline, in order."""
        if isinstance(self.root, Pipeline):
            return tuple(call.name for call in self.root.filters)
        return ()

    def with_filter(self, name: str, func: FilterFunc) -> Expression:
        """Return a copy with one more filter at the end of the pipeline.

        Used to append the auto-escape filter at parse time.
        """
        call = FilterCall(name, func)
        if isinstance(self.root, Pipeline):
            root = Pipeline(self.root.base, (*self.root.filters, call))
        else:
            root = Pipeline(self.root, (call,))
        return Expression(self.source, root)


# =============================================================================
# Parser
# =============================================================================


class _ExpressionParser:
    """Recursive descent over the token list."""

    __slots__ = ("_source", "_tokens", "_pos", "_filters")

    def __init__(self, source: str, filters: FilterRegistry) -> None:
        self._source = source
        self._tokens = _tokenize(source)
        self._pos = 0
        self._filters = filters

    def parse(self) -> ExprNode:
        node = self._or_expr()
        token = self._peek()
        if token.kind != "end":
            self._fail(f"unexpected {token.value!r}", token)
        return node

    def _peek(self) -> _Token:
        return self._tokens[self._pos]

    def _next(self) -> _Token:
        token = self._tokens[self._pos]
        if token.kind != "end":
            self._pos += 1
        return token

    def _at_keyword(self, word: str) -> bool:
        token = self._peek()
        return token.kind == "path" and token.value == word

    def _at_op(self, op: str) -> bool:
        token = self._peek()
        return token.kind == "op" and token.value == op

    def _fail(self, message: str, token: _Token) -> NoReturn:
        raise ExpressionSyntaxError(message, self._source, token.pos)

    def _or_expr(self) -> ExprNode:
        operands = [self._and_expr()]
        while self._at_keyword("or"):
            self._next()
            operands.append(self._and_expr())
        return operands[0] if len(operands) == 1 else BoolOp("or", tuple(operands))

    def _and_expr(self) -> ExprNode:
        operands = [self._not_expr()]
        while self._at_keyword("and"):
            self._next()
            operands.append(self._not_expr())
        return operands[0] if len(operands) == 1 else BoolOp("and", tuple(operands))

    def _not_expr(self) -> ExprNode:
        if self._at_keyword("not"):
            self._next()
            return Not(self._not_expr())
        return self._comparison()

    def _comparison(self) -> ExprNode:
        left = self._pipeline()
        token = self._peek()
        op: str | None = None
        if token.kind == "op" and token.value in _COMPARE_OPS:
            op = token.value
            self._next()
        elif self._at_keyword("in"):
            op = "in"
            self._next()
        elif self._at_keyword("not"):
            self._next()
            if not self._at_keyword("in"):
                self._fail("expected 'in' after 'not'", self._peek())
            self._next()
            op = "not in"
        if op is None:
            return left
        return Compare(op, left, self._pipeline())

    def _pipeline(self) -> ExprNode:
        base = self._primary()
        calls: list[FilterCall] = []
        while self._at_op("|"):
            self._next()
            token = self._next()
            if token.kind != "path" or "." in token.value:
                self._fail("expected filter name after '|'", token)
            func = self._filters.get(token.value)
            if func is None:
                self._fail(f"unknown filter '{token.value}'", token)
            arg: ExprNode | None = None
            if self._at_op(":"):
                self._next()
                arg = self._primary()
            calls.append(FilterCall(token.value, func, arg))
        if not calls:
            return base
        return Pipeline(base, tuple(calls))

    def _primary(self) -> ExprNode:
        token = self._next()
        match token.kind:
            case "string":
                return Literal(_unquote(token.value))
            case "number":
                if "." in token.value:
                    return Literal(float(token.value))
                return Literal(int(token.value))
            case "path":
                if token.value in _KEYWORD_LITERALS:
                    return Literal(_KEYWORD_LITERALS[token.value])
                if token.value in _RESERVED:
                    self._fail(f"unexpected keyword '{token.value}'", token)
                return Variable(token.value)
            case "op" if token.value == "(":
                node = self._or_expr()
                closing = self._next()
                if closing.kind != "op" or closing.value != ")":
                    self._fail("expected ')'", closing)
                return node
            case "end":
                self._fail("unexpected end of expression", token)
        self._fail(f"unexpected {token.value!r}", token)


def compile_expression(source: str, filters: FilterRegistry | None = None) -> Expression:
    """Compile expression text into an Expression.

    Args:
        source: Expression text (surrounding whitespace is ignored)
        filters: Registry used to resolve filter names (defaults if None)

    Returns:
        Compiled Expression

    Raises:
        ExpressionSyntaxError: On malformed syntax or unknown filters
    """
    text = source.strip()
    if not text:
        raise ExpressionSyntaxError("empty expression", source, 0)
    if filters is None:
        filters = create_default_filters()
    parser = _ExpressionParser(text, filters)
    return Expression(text, parser.parse())


__all__ = [
    "BoolOp",
    "Compare",
    "Expression",
    "FilterCall",
    "Literal",
    "Not",
    "Pipeline",
    "Variable",
    "compile_expression",
]
