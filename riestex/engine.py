""" FORTH-style (postfix) expression compiler for RIES output."""

"""
Tokenizes a compact postfix expression such as ``x 1 + 2 ^`` or
``8 dup* 5 +``, builds an expression tree with an operand stack, and
renders that tree as LaTeX (e.g. ``(x + 1)^{2}``, ``8^{2} + 5``).
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, NamedTuple

from riestex.errors import (
    ExpressionTooDeepError,
    InsufficientOperandsError,
    InvalidExpressionError,
    UnknownNodeTypeError,
    UnknownOperatorError,
    UnknownTokenError,
)

logger = logging.getLogger(__name__)


# ── Token tables ────────────────────────────────────────────────────────

_DECIMAL_RE = re.compile(r'^-?(?:\d+(?:\.\d*)?|\.\d+)$')
_FRACTION_RE = re.compile(r'^-?\d+/\d+$')
_LETTER_RE = re.compile(r'^[a-z]$')
_DUP_SQUARE_RE = re.compile(r'(?<!\S)dup\*(?!\S)')

CONSTANTS = MappingProxyType({
    "pi": r"\pi",
    "p": r"\pi",
    "phi": r"\phi",
    "e": "e",
    "a": "a",
    "b": "b",
    "x": "x",
    "y": "y",
})


def _trig_pi(name: str) -> Callable[[str], str]:
    """Renderer for ``sinpi``/``cospi``/``tanpi``.

    RIES writes ``1/9 cospi`` for cos(π/9), so a simple integer fraction
    argument keeps only its denominator.
    """
    def render(arg: str) -> str:
        m = re.match(r'^(\d+)\s*/\s*(\d+)$', arg)
        if m:
            return rf"\{name}\bigl(\frac{{\pi}}{{{m.group(2)}}}\bigr)"
        return rf"\{name}\bigl(\pi {arg}\bigr)"
    return render


def _sqrt(arg: str) -> str:
    return rf"\sqrt{{{arg}}}"


def _ln(arg: str) -> str:
    return rf"\ln({arg})"


def _recip(arg: str) -> str:
    return rf"\frac{{1}}{{{arg}}}"


UNARY_OPS = MappingProxyType({
    "q": _sqrt,
    "sqrt": _sqrt,
    "l": _ln,
    "ln": _ln,
    "s": lambda arg: rf"\sin({arg})",
    "r": _recip,
    "recip": _recip,
    "log2": lambda arg: rf"\log_{{2}}({arg})",
    "exp": lambda arg: f"e^{{{arg}}}",
    "neg": lambda arg: f"-{arg}",
    "sinpi": _trig_pi("sin"),
    "cospi": _trig_pi("cos"),
    "tanpi": _trig_pi("tan"),
})


class BinaryOp(NamedTuple):
    prec: int
    render: Callable[[str, str], str]


def _power(base: str, exponent: str) -> str:
    return f"{base}^{{{exponent}}}"


BINARY_OPS = MappingProxyType({
    "+": BinaryOp(1, lambda a, b: f"{a} + {b}"),
    "-": BinaryOp(1, lambda a, b: f"{a} - {b}"),
    "*": BinaryOp(2, lambda a, b: f"{a} {b}"),
    "/": BinaryOp(2, lambda a, b: rf"\frac{{{a}}}{{{b}}}"),
    "^": BinaryOp(3, _power),
    "**": BinaryOp(3, _power),
    "atan2": BinaryOp(1, lambda a, b: rf"\operatorname{{atan2}}({a},{b})"),
    "logN": BinaryOp(3, lambda a, b: rf"\log_{{{b}}}({a})"),
    "root": BinaryOp(3, lambda a, b: f"{a}^{{1/{b}}}"),
})

_POWER_PREC = 3

# Operators whose result must be bracketed before it is raised to a power.
_BRACKETED_BINARY = frozenset({"+", "-", "*", "/", "^", "**", "root"})
_BRACKETED_UNARY = frozenset({"neg", "exp"})
_ADDITIVE = frozenset({"+", "-"})


class TokenKind(Enum):
    NUMBER = "number"
    VARIABLE = "variable"
    CONSTANT = "constant"
    UNARY = "unary"
    BINARY = "binary"


def classify_token(token: str) -> TokenKind:
    """Return the category of a single postfix token.

    Raises UnknownTokenError when the token matches none of them.
    """
    if _DECIMAL_RE.match(token) or _FRACTION_RE.match(token):
        return TokenKind.NUMBER
    if _LETTER_RE.match(token) and token not in CONSTANTS:
        return TokenKind.VARIABLE
    if token in CONSTANTS:
        return TokenKind.CONSTANT
    if token in UNARY_OPS:
        return TokenKind.UNARY
    if token in BINARY_OPS:
        return TokenKind.BINARY
    raise UnknownTokenError(token)


# ── Expression tree ─────────────────────────────────────────────────────

class NodeKind(Enum):
    LITERAL = "literal"
    VARIABLE = "variable"
    CONSTANT = "constant"
    UNARY = "unary"
    BINARY = "binary"


@dataclass(frozen=True)
class Node:
    """One node of a parsed expression.

    ``value`` holds the literal text, variable name, constant symbol or
    operator token. ``needs_parens_when_exponentiated`` is derived from the
    operator once, at construction.
    """
    kind: NodeKind
    value: str
    children: tuple = ()
    needs_parens_when_exponentiated: bool = field(init=False, default=False)

    def __post_init__(self):
        if self.kind is NodeKind.BINARY:
            flag = self.value in _BRACKETED_BINARY
        elif self.kind is NodeKind.UNARY:
            flag = self.value in _BRACKETED_UNARY
        else:
            flag = False
        object.__setattr__(self, "needs_parens_when_exponentiated", flag)

    def is_op(self, *ops: str) -> bool:
        return self.kind is NodeKind.BINARY and self.value in ops


# ── Parser ──────────────────────────────────────────────────────────────

def tokenize(text: str) -> list[str]:
    """Split a postfix string into tokens, expanding ``dup*`` to ``2 **``."""
    return _DUP_SQUARE_RE.sub("2 **", text).split()


def parse_postfix(tokens) -> Node:
    """Build an expression tree from a sequence of postfix tokens."""
    stack: list[Node] = []
    for token in tokens:
        kind = classify_token(token)
        if kind is TokenKind.NUMBER:
            stack.append(Node(NodeKind.LITERAL, token))
        elif kind is TokenKind.VARIABLE:
            stack.append(Node(NodeKind.VARIABLE, token))
        elif kind is TokenKind.CONSTANT:
            stack.append(Node(NodeKind.CONSTANT, CONSTANTS[token]))
        elif kind is TokenKind.UNARY:
            if not stack:
                raise InsufficientOperandsError(token, 1, 0)
            arg = stack.pop()
            stack.append(Node(NodeKind.UNARY, token, (arg,)))
        else:
            if len(stack) < 2:
                raise InsufficientOperandsError(token, 2, len(stack))
            right = stack.pop()
            left = stack.pop()
            stack.append(Node(NodeKind.BINARY, token, (left, right)))

    if len(stack) != 1:
        raise InvalidExpressionError(len(stack))
    return stack[0]


# ── LaTeX renderer ──────────────────────────────────────────────────────

_SIGNED_INT_RE = re.compile(r'^-?\d+$')
_SIMPLE_FACTOR_RE = re.compile(r'^(?:\d+|e\^\{\d+\})$')


def _wrap(text: str) -> str:
    return f"({text})"


def _render_unary(node: Node) -> str:
    fn = UNARY_OPS.get(node.value)
    if fn is None:
        raise UnknownOperatorError(node.value)
    child = node.children[0]
    arg = to_latex(child, 0, True)
    # The plain negation renderer adds no brackets of its own.
    if node.value == "neg" and child.is_op(*_ADDITIVE):
        return f"-{_wrap(arg)}"
    return fn(arg)


def _render_exponent(node: Node) -> str:
    """Render an exponent, using an inline ``a/b`` for short fractions."""
    if not node.is_op("/"):
        return to_latex(node, 0, True)
    num = to_latex(node.children[0], 0, True)
    den = to_latex(node.children[1], 0, True)
    simple = (
        num == "1"
        or (len(num) <= 2 and len(den) <= 2)
        or (_SIGNED_INT_RE.match(num) and _SIGNED_INT_RE.match(den))
    )
    if simple:
        return f"{num}/{den}"
    return rf"\frac{{{num}}}{{{den}}}"


def _render_power(node: Node, in_func: bool) -> str:
    base_node, exp_node = node.children
    base = to_latex(base_node, _POWER_PREC, in_func)
    if base_node.needs_parens_when_exponentiated:
        base = _wrap(base)
    return _power(base, _render_exponent(exp_node))


def _render_root(node: Node, in_func: bool) -> str:
    base_node, index_node = node.children
    base = to_latex(base_node, _POWER_PREC, in_func)
    if "^" in base or base_node.needs_parens_when_exponentiated:
        base = _wrap(base)
    index = to_latex(index_node, 0, True)
    return BINARY_OPS["root"].render(base, index)


def _render_product(node: Node, in_func: bool) -> str:
    left_node, right_node = node.children
    left = to_latex(left_node, 0, in_func)
    right = to_latex(right_node, 0, in_func)
    if left_node.kind is NodeKind.LITERAL and right_node.kind is NodeKind.LITERAL:
        return rf"{left} \cdot {right}"

    if left_node.is_op(*_ADDITIVE):
        left = _wrap(left)
    # A bare integer or e^{n} factor reads better in front: "2 x", not "x 2".
    if _SIMPLE_FACTOR_RE.match(right):
        return f"{right} {left}"
    if right_node.is_op(*_ADDITIVE):
        right = _wrap(right)
    return BINARY_OPS["*"].render(left, right)


def _render_binary(node: Node, parent_prec: float, in_func: bool) -> str:
    op = BINARY_OPS.get(node.value)
    if op is None:
        raise UnknownOperatorError(node.value)
    left_node, right_node = node.children

    if node.value == "/":
        return op.render(to_latex(left_node, 0, True), to_latex(right_node, 0, True))
    if node.value in ("^", "**"):
        return _render_power(node, in_func)
    if node.value == "root":
        return _render_root(node, in_func)
    if node.value == "*":
        return _render_product(node, in_func)

    # The enclosing power already brackets this operand.
    inside_power = node.needs_parens_when_exponentiated and parent_prec == _POWER_PREC

    left = to_latex(left_node, op.prec, in_func)
    if inside_power:
        right = to_latex(right_node, 0, True)
    else:
        right = to_latex(right_node, op.prec, in_func)
    # a - (b + c): a bare additive right operand would flip its signs.
    if node.value == "-" and right_node.is_op(*_ADDITIVE):
        right = _wrap(right)

    expr = op.render(left, right)
    if inside_power:
        return expr
    if not in_func and op.prec < parent_prec and node.needs_parens_when_exponentiated:
        expr = _wrap(expr)
    return expr


def to_latex(node: Node, parent_prec: float = 0, in_func: bool = False) -> str:
    """Render an expression tree as LaTeX.

    *parent_prec* is the precedence of the enclosing operator; *in_func*
    is True inside a function argument or fraction, whose delimiters
    already group the text.
    """
    if node.kind in (NodeKind.LITERAL, NodeKind.VARIABLE, NodeKind.CONSTANT):
        return node.value
    if node.kind is NodeKind.UNARY:
        return _render_unary(node)
    if node.kind is NodeKind.BINARY:
        return _render_binary(node, parent_prec, in_func)
    raise UnknownNodeTypeError(node.kind)


# ── Public entry point ──────────────────────────────────────────────────

def tokens_to_latex(text: str) -> str:
    """Convert a RIES postfix expression into LaTeX.

    Raises a ParseError subclass when the tokens do not form exactly one
    expression, and ExpressionTooDeepError when the tree nests deeper than
    the interpreter's recursion limit.
    """
    tokens = tokenize(text)
    tree = parse_postfix(tokens)
    try:
        latex = to_latex(tree)
    except RecursionError:
        raise ExpressionTooDeepError(len(tokens)) from None
    logger.debug("converted %r -> %r", text, latex)
    return latex


convert_forth_to_latex = tokens_to_latex
