"""Numeric formatting and difference highlighting for solved x-values."""

"""
RIES reports each equation as ``x = T + offset``. The UI shows that x-value
next to the typed target, greying out the digits that no longer agree with
it. Values are compared as strings, so the typed precision of the target
is respected (``3.`` confirms one decimal, ``3.000`` confirms three).
"""

import logging
import re
from decimal import Decimal, InvalidOperation, localcontext

from riestex.config import settings

logger = logging.getLogger(__name__)

_LATEX_SCI_RE = re.compile(r'^\s*([+-]?\d*\.?\d+)\s*\\cdot\s*10\^\{([+-]?\d+)\}\s*$')
_E_SCI_RE = re.compile(r'^\s*([+-]?\d*\.?\d+)[eE]([+-]?\d+)\s*$')
_SIGNED_EXP_RE = re.compile(r'^([+-]?\d*\.?\d+)e([+-]\d+)$', re.IGNORECASE)

# Working precision for rescaling typed targets; well above any RIES output.
_DECIMAL_PREC = 100


def _textcolor(text: str) -> str:
    return rf"\textcolor{{{settings.HIGHLIGHT_COLOR}}}{{{text}}}"


def _parse_scientific(s: str):
    """Split ``1.23 \\cdot 10^{4}`` or ``1.23e4`` into its parts.

    Returns ``(coefficient, exponent, style)`` with *style* ``"latex"`` or
    ``"e"``, or None when *s* is not in scientific notation.
    """
    m = _LATEX_SCI_RE.match(s)
    if m:
        return m.group(1), int(m.group(2)), "latex"
    m = _E_SCI_RE.match(s)
    if m:
        return m.group(1), int(m.group(2)), "e"
    return None


def _to_decimal(s: str) -> Decimal:
    sci = _parse_scientific(s)
    if sci:
        coefficient, exponent, _ = sci
        return Decimal(coefficient).scaleb(exponent)
    return Decimal(s.strip())


def _plain(value: Decimal) -> str:
    """Fixed-point text of *value* without trailing fractional zeros."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _rescaled_digits(target: str, exponent: int) -> str:
    """Digits of *target* expressed as a coefficient of ``10^exponent``."""
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        scaled = _to_decimal(target).scaleb(-exponent)
        return _plain(scaled).replace(".", "")


def _matching_digits(a: str, b: str) -> int:
    n = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        n += 1
    return n


def _highlight_scientific(target: str, computed: str, sci) -> str | None:
    coefficient, exponent, style = sci
    coeff_digits = coefficient.replace(".", "")

    target_sci = _parse_scientific(target)
    if target_sci and target_sci[1] == exponent:
        # Same magnitude: only the typed digits of the target are confirmed.
        target_digits = target_sci[0].replace(".", "")
    else:
        try:
            target_digits = _rescaled_digits(target, exponent)
        except InvalidOperation:
            logger.debug("target %r is not numeric; comparing as text", target)
            return None
        # An exact plain value continues with zeros.
        target_digits = target_digits.ljust(len(coeff_digits), "0")

    match = _matching_digits(coeff_digits, target_digits)
    if match >= len(coeff_digits):
        # 10^{0} is never shown.
        return coefficient if exponent == 0 else computed

    split = match
    point = coefficient.find(".")
    if point != -1 and match >= point:
        split += 1
    highlighted = coefficient[:split] + _textcolor(coefficient[split:])

    if exponent == 0:
        return highlighted
    if style == "e":
        return f"{highlighted}e{exponent}"
    return rf"{highlighted} \cdot 10^{{{exponent}}}"


def _highlight_prefix(target: str, computed: str) -> str | None:
    """Highlight a plain decimal that extends the typed target."""
    prefix = target + "0" if target.endswith(".") else target
    if not computed.startswith(prefix):
        return None
    pos = len(prefix)
    if "." not in prefix and computed[pos:pos + 1] == ".":
        pos += 1
    # Zeros past the decimal point are still confirmed precision.
    if "." in computed[:pos]:
        while pos < len(computed) and computed[pos] == "0":
            pos += 1
    if pos >= len(computed):
        return computed
    return computed[:pos] + _textcolor(computed[pos:])


def _highlight_text(target: str, computed: str) -> str:
    i = _matching_digits(target, computed)
    if i >= len(computed):
        return computed
    return computed[:i] + _textcolor(computed[i:])


def highlight_difference(target: str, computed: str) -> str:
    """Return *computed* with the digits that diverge from *target* greyed.

    *target* is the value as typed; *computed* is the solved x-value, plain
    (``3.14159270``) or scientific (``1.2346 \\cdot 10^{10}``, ``1.2346e10``).
    The common leading digits stay plain and the rest is wrapped in
    ``\\textcolor{<HIGHLIGHT_COLOR>}{...}``. No digit of *computed* is lost.
    """
    if target == computed:
        return computed

    sci = _parse_scientific(computed)
    if sci:
        result = _highlight_scientific(target, computed, sci)
        if result is not None:
            return result
    else:
        result = _highlight_prefix(target, computed)
        if result is not None:
            return result

    return _highlight_text(target, computed)


def format_number_latex(value) -> str:
    """Rewrite e-notation with a signed exponent as LaTeX.

    ``1.3425e+30`` → ``1.3425 \\cdot 10^{30}`` and ``2.5e-05`` →
    ``2.5 \\cdot 10^{-5}``; anything else is returned
    unchanged (as a string).
    """
    text = str(value)
    m = _SIGNED_EXP_RE.match(text)
    if not m:
        return text
    return rf"{m.group(1)} \cdot 10^{{{int(m.group(2))}}}"


def _fmt_x(value: float, decimals: int) -> str:
    magnitude = abs(value)
    if magnitude > 0 and (magnitude >= 1e10 or magnitude < 1e-4):
        return format_number_latex(f"{value:.{decimals}e}")
    return f"{value:.{decimals}f}"


def solved_value_markup(target: str, offset: str, decimals: int | None = None) -> str:
    """Markup for the x-value of one equation row: ``T + offset``.

    Large and tiny values use scientific notation. The result is compared
    against *target* with :func:`highlight_difference`.
    """
    if decimals is None:
        decimals = settings.DECIMALS
    try:
        t = float(target)
    except (TypeError, ValueError):
        return str(target)
    try:
        delta = float(re.sub(r"\s+", "", offset or ""))
    except ValueError:
        delta = 0.0
    return highlight_difference(str(target), _fmt_x(t + delta, decimals))
