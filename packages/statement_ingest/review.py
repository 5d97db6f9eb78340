"""Helpers for the review/preview step and the hand-off to the importer.

The engine returns every row, valid or not. Before commit a person looks at
the counts and totals (:func:`summarize`) and the importer receives only the
valid rows in a flat, JSON-friendly shape (:func:`to_import_records`).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .amounts import fmt_amount
from .models import NormalizedTransaction

DEFAULT_CATEGORY = "Uncategorized"


@dataclass(frozen=True, slots=True)
class ImportSummary:
    total: int
    valid: int
    invalid: int
    total_debits: Decimal
    total_credits: Decimal


def summarize(transactions: Iterable[NormalizedTransaction]) -> ImportSummary:
    """Count rows and total the amounts of the valid ones."""

    total = valid = 0
    debits = Decimal(0)
    credits = Decimal(0)
    for t in transactions:
        total += 1
        if not t.is_valid:
            continue
        valid += 1
        debits += t.debit_amount
        credits += t.credit_amount
    return ImportSummary(
        total=total,
        valid=valid,
        invalid=total - valid,
        total_debits=debits,
        total_credits=credits,
    )


def to_import_records(
    transactions: Iterable[NormalizedTransaction],
    *,
    source_name: str | None = None,
    category: str = DEFAULT_CATEGORY,
) -> list[dict[str, Any]]:
    """Return importer payload dicts for the valid transactions only.

    Keys (in order): ``source_row_index, date, description, debit_amount,
    credit_amount, category, imported_from``. ``description`` joins the
    primary and secondary descriptions; amounts are 2-decimal strings.
    """

    return [
        {
            "source_row_index": t.source_row_index,
            "date": t.date,
            "description": t.full_description,
            "debit_amount": fmt_amount(t.debit_amount),
            "credit_amount": fmt_amount(t.credit_amount),
            "category": category,
            "imported_from": source_name,
        }
        for t in transactions
        if t.is_valid
    ]


__all__ = ["DEFAULT_CATEGORY", "ImportSummary", "summarize", "to_import_records"]
