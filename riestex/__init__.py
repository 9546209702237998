"""RiesTeX: LaTeX rendering of RIES postfix equations and x-value highlighting."""

__version__ = "1.0.0"

from riestex.engine import convert_forth_to_latex, tokens_to_latex
from riestex.errors import (
    ExpressionTooDeepError,
    InsufficientOperandsError,
    InvalidExpressionError,
    ParseError,
    RenderError,
    RiesTexError,
    UnknownNodeTypeError,
    UnknownOperatorError,
    UnknownTokenError,
)
from riestex.highlight import format_number_latex, highlight_difference, solved_value_markup
from riestex.output import EquationRecord, parse_solver_output

__all__ = [
    "tokens_to_latex",
    "convert_forth_to_latex",
    "parse_solver_output",
    "highlight_difference",
    "format_number_latex",
    "solved_value_markup",
    "EquationRecord",
    "RiesTexError",
    "ParseError",
    "RenderError",
    "UnknownTokenError",
    "InsufficientOperandsError",
    "InvalidExpressionError",
    "UnknownOperatorError",
    "UnknownNodeTypeError",
    "ExpressionTooDeepError",
]
