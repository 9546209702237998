"""Exception types raised while compiling RIES postfix expressions.

Every error derives from ``ValueError`` so callers that already treat bad
input as a ``ValueError`` (the HTTP backend, the CLI) keep working.
"""


class RiesTexError(ValueError):
    """Base class for all RiesTeX failures."""


# ── Parse errors (malformed token input) ────────────────────────────────

class ParseError(RiesTexError):
    pass


class UnknownTokenError(ParseError):
    def __init__(self, token: str):
        super().__init__(f"Unknown token: {token}")
        self.token = token


class InsufficientOperandsError(ParseError):
    def __init__(self, operator: str, needed: int, available: int):
        kind = "unary" if needed == 1 else "binary"
        super().__init__(
            f"Insufficient operands for {kind} op {operator} "
            f"(needs {needed}, stack has {available})"
        )
        self.operator = operator
        self.needed = needed
        self.available = available


class InvalidExpressionError(ParseError):
    def __init__(self, stack_size: int):
        super().__init__(f"Invalid postfix expression; stack={stack_size}")
        self.stack_size = stack_size


# ── Render errors (internal inconsistencies) ────────────────────────────

class RenderError(RiesTexError):
    pass


class UnknownOperatorError(RenderError):
    def __init__(self, operator: str):
        super().__init__(f"Unknown operator: {operator}")
        self.operator = operator


class UnknownNodeTypeError(RenderError):
    def __init__(self, kind):
        super().__init__(f"Unknown node type: {kind}")
        self.kind = kind


class ExpressionTooDeepError(RenderError):
    def __init__(self, token_count: int):
        super().__init__(f"Expression too deeply nested to render ({token_count} tokens)")
        self.token_count = token_count
