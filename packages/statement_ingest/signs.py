"""Sign resolution: source columns -> ledger ``(debit, credit)``.

Three cases, decided by the mapping alone:

A. Separate debit/credit columns. Source values follow bank-statement
   semantics (credit = money in, debit = money out) and are swapped into
   ledger semantics: money entering the bank account is a debit to the cash
   account. The swap is applied unconditionally.
B. A single signed amount column, interpreted per
   :class:`~statement_ingest.models.StatementConvention`.
C. No monetary column: zero amounts and ``RowError.AMOUNT_UNMAPPED``.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from .amounts import parse_amount
from .logging_setup import get_logger
from .models import ColumnMapping, ResolvedAmounts, RowError, StatementConvention

logger = get_logger("statement_ingest.signs")

_ZERO = Decimal(0)


def _cell(row: Sequence[Any], column: int | None) -> Any:
    if column is None or column >= len(row):
        return None
    return row[column]


def _from_debit_credit(source_debit: Decimal, source_credit: Decimal) -> ResolvedAmounts:
    # Bank credit (money in) -> ledger debit; bank debit (money out) -> ledger credit.
    debit = abs(source_credit)
    credit = abs(source_debit)
    if debit and credit:
        # A row filled on both sides is netted onto the larger side.
        logger.debug("netting two-sided row: debit=%s credit=%s", debit, credit)
        net = debit - credit
        debit, credit = (net, _ZERO) if net > 0 else (_ZERO, credit - debit)
    return ResolvedAmounts(debit, credit)


def _from_signed(amount: Decimal, convention: StatementConvention) -> ResolvedAmounts:
    if convention is StatementConvention.CARD:
        if amount > 0:
            return ResolvedAmounts(_ZERO, amount)
        return ResolvedAmounts(-amount if amount else _ZERO, _ZERO)
    if amount > 0:
        return ResolvedAmounts(amount, _ZERO)
    return ResolvedAmounts(_ZERO, -amount if amount else _ZERO)


def resolve_amounts(
    row: Sequence[Any],
    mapping: ColumnMapping,
    convention: StatementConvention = StatementConvention.BANK,
) -> ResolvedAmounts:
    """Compute the ledger ``(debit_amount, credit_amount)`` for one row.

    Unparseable cells count as zero and never raise. The debit/credit pair
    takes precedence over ``amount`` when both are mapped.
    """

    if mapping.has_debit_credit_pair:
        return _from_debit_credit(
            parse_amount(_cell(row, mapping.debit_amount)),
            parse_amount(_cell(row, mapping.credit_amount)),
        )
    if mapping.amount is not None:
        return _from_signed(parse_amount(_cell(row, mapping.amount)), convention)
    return ResolvedAmounts(_ZERO, _ZERO, RowError.AMOUNT_UNMAPPED)


__all__ = ["resolve_amounts"]
