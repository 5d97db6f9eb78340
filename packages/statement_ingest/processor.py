"""Row processing: raw table + mapping -> normalized transaction candidates.

:func:`process` is pure. It reads the table, never writes to it, and keeps no
state between calls, so "edit the mapping, reprocess" is just another call.
Each row is handled by :func:`process_row` independently of every other row.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .dates import normalize_date
from .logging_setup import get_logger
from .models import (
    ColumnMapping,
    NormalizedTransaction,
    RawTable,
    RowError,
    StatementConvention,
)
from .signs import resolve_amounts

logger = get_logger("statement_ingest.processor")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def process_row(
    table: RawTable,
    index: int,
    mapping: ColumnMapping,
    convention: StatementConvention = StatementConvention.BANK,
) -> NormalizedTransaction:
    """Normalize row ``index`` of ``table``; problems become row errors."""

    errors: list[RowError] = []

    date = ""
    if mapping.date is None:
        errors.append(RowError.DATE_UNMAPPED)
    else:
        date = normalize_date(table.cell(index, mapping.date))
        if not date:
            errors.append(RowError.DATE_INVALID)

    description = _text(table.cell(index, mapping.description))
    secondary = _text(table.cell(index, mapping.secondary_description))

    resolved = resolve_amounts(table.rows[index], mapping, convention)
    if resolved.error is not None:
        errors.append(resolved.error)

    return NormalizedTransaction(
        source_row_index=index,
        date=date,
        description=description,
        secondary_description=secondary,
        debit_amount=resolved.debit_amount,
        credit_amount=resolved.credit_amount,
        is_valid=not errors,
        errors=tuple(errors),
    )


def process(
    table: RawTable | tuple[Sequence[str], Iterable[Sequence[Any]]],
    mapping: ColumnMapping,
    convention: StatementConvention | str = StatementConvention.BANK,
) -> list[NormalizedTransaction]:
    """Normalize every row of ``table`` with ``mapping`` and ``convention``.

    ``table`` may also be given as a ``(headers, rows)`` pair. Returns one
    transaction per source row, in source order, valid or not; a batch with
    no valid rows is still returned in full.
    """

    if not isinstance(table, RawTable):
        headers, rows = table
        table = RawTable.from_rows(headers, rows)
    convention = StatementConvention.parse(convention)

    out = [process_row(table, i, mapping, convention) for i in range(len(table))]

    invalid = sum(1 for t in out if not t.is_valid)
    logger.debug(
        "processed %d rows (%d invalid) convention=%s mapping=%s",
        len(out),
        invalid,
        convention,
        mapping.model_dump(exclude_none=True),
    )
    return out


__all__ = ["process", "process_row"]
