"""Extraction of equations from raw RIES output."""

"""
RIES (run with ``-F0``/FORTH output) prints one candidate equation per line:

    x + 1 = 2 x                 for x = T - 3.5          {50}
    x = 8 dup* 5 +              ('exact' match)          {64}

Each side is converted to LaTeX with :func:`riestex.engine.tokens_to_latex`.
A side that cannot be converted is kept as raw text so the equation is
still shown.
"""

import logging
import re
from dataclasses import asdict, dataclass

from riestex.engine import tokens_to_latex
from riestex.errors import RiesTexError

logger = logging.getLogger(__name__)

# "x + 1 = 2 x for x = T - 3.5", also "T + 1.234e+05"
OFFSET_LINE_RE = re.compile(
    r'^\s*(.*?)\s*=\s*(.*?)\s+for\s+x\s*=\s*T\s*([+\-]\s*[\d.]+(?:e[+\-]?\d+)?)'
)

_QUOTE = "['\"‘’“”]"
# "x = 8 dup* 5 + ('exact' match)"
EXACT_LINE_RE = re.compile(
    r'^\s*(.*?)\s*=\s*(.*?)\s+\(' + _QUOTE + r'exact' + _QUOTE + r'\s+match\)'
)

_BANNERS = ("Your target value:", "mrob.com/ries")
_TARGET_RE = re.compile(r'T = ([\d.]+)')


@dataclass(frozen=True)
class EquationRecord:
    lhs: str
    rhs: str
    offset: str = "0"

    def as_dict(self) -> dict:
        return asdict(self)


# Shown instead of a RIES run when the target is zero.
ZERO_TARGET_EQUATIONS = (
    EquationRecord("x", "0"),
    EquationRecord("x", r"\sin(0)"),
    EquationRecord(r"\sin(x)", "0"),
    EquationRecord(r"\tan(x)", "0"),
    EquationRecord(r"\cos(x)-1", "0"),
    EquationRecord("e^x-1", "0"),
    EquationRecord(r"\ln(1+x)", "0"),
    EquationRecord("x^2", "0"),
)


def is_zero_target(value) -> bool:
    """True for targets such as ``0``, ``0.0`` or ``-0``."""
    try:
        return float(str(value).strip()) == 0
    except ValueError:
        return False


def equations_for_zero_target() -> list[EquationRecord]:
    return list(ZERO_TARGET_EQUATIONS)


def _convert_side(raw: str) -> str:
    try:
        return tokens_to_latex(raw)
    except RiesTexError as e:
        logger.debug("keeping raw side %r: %s", raw, e)
        return raw


def _no_equations_record(text: str) -> EquationRecord:
    m = _TARGET_RE.search(text)
    value = m.group(1) if m else "value"
    return EquationRecord("x", rf"\text{{No equations found for }} {value}")


def parse_line(line: str) -> EquationRecord | None:
    """Parse one output line, or return None when it holds no equation."""
    m = OFFSET_LINE_RE.match(line)
    if m:
        offset = m.group(3).strip()
    else:
        m = EXACT_LINE_RE.match(line)
        if not m:
            return None
        offset = "0"
    lhs_raw, rhs_raw = m.group(1).strip(), m.group(2).strip()
    return EquationRecord(_convert_side(lhs_raw), _convert_side(rhs_raw), offset or "0")


def parse_solver_output(text: str) -> list[EquationRecord]:
    """Extract every equation from a block of RIES output, in order.

    Returns an empty list for empty input, and a single "no equations
    found" record when the text is RIES output without any equation line.
    """
    if not text:
        return []

    lines = text.splitlines()
    results = []
    for line in lines:
        record = parse_line(line)
        if record is not None:
            results.append(record)
    logger.debug("parsed %d equation(s) from %d line(s)", len(results), len(lines))

    if not results and any(banner in text for banner in _BANNERS):
        return [_no_equations_record(text)]
    return results
