"""Lenient monetary parsing for raw statement cells.

Source exports disagree on how money is written (``"1,234.56"``,
``"$45.00"``, ``"($12.00)"``, ``"-$3"``, native floats from spreadsheet
readers). :func:`parse_amount` accepts all of these and turns anything it
cannot read into ``Decimal(0)`` instead of raising; the review step is where a
human notices a zeroed row.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

_ZERO = Decimal(0)


def _strip_markers(s: str) -> tuple[str, bool]:
    negative = False
    # Iteratively strip leading sign, currency symbol, and surrounding
    # parentheses until stable so any ordering of these markers works.
    while True:
        changed = False
        if s.startswith("+"):
            s = s[1:].lstrip()
            changed = True
        elif s.startswith("-"):
            negative = True
            s = s[1:].lstrip()
            changed = True
        if s.startswith("$"):
            s = s[1:].lstrip()
            changed = True
        if s.startswith("(") and s.endswith(")") and len(s) >= 2:
            negative = True
            s = s[1:-1].strip()
            changed = True
        if not changed:
            return s, negative


def to_decimal(value: Any) -> Decimal | None:
    """Strictly parse ``value`` as a decimal; return ``None`` when unreadable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, float):
        # Go through repr so 0.1 stays 0.1 rather than its binary expansion.
        d = Decimal(repr(value))
    else:
        s = str(value).strip()
        if not s:
            return None
        s, negative = _strip_markers(s)
        # Thousands separators; keep the decimal point.
        s = s.replace(",", "").strip()
        try:
            d = Decimal(s)
        except InvalidOperation:
            return None
        if negative:
            d = -abs(d)
    if not d.is_finite():
        return None
    return d


def parse_amount(value: Any) -> Decimal:
    """Parse a raw cell as a signed decimal, defaulting to zero.

    Never raises: empty, malformed (``"N/A"``), NaN or infinite values all
    become ``Decimal(0)``.
    """

    d = to_decimal(value)
    return _ZERO if d is None else d


def fmt_amount(d: Decimal) -> str:
    # Exactly two decimals; ASCII dot; leading minus for negatives.
    with localcontext() as ctx:
        # Room for every integer digit plus the two places.
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        q = d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{q:.2f}"


__all__ = ["fmt_amount", "parse_amount", "to_decimal"]
