"""Data models for ``statement_ingest``.

The engine works on an already-extracted cell grid (:class:`RawTable`) and
emits one :class:`NormalizedTransaction` per source row. Column assignments
travel separately as a :class:`ColumnMapping` value so the same table can be
reprocessed any number of times with different mappings or conventions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawTable:
    """Header row plus raw cell values as produced by a file parser.

    Cells are left exactly as the parser produced them (``str``, numbers,
    ``date``/``datetime`` or ``None``). Rows may be ragged.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...]

    @classmethod
    def from_rows(cls, headers: Sequence[Any], rows: Iterable[Sequence[Any]]) -> RawTable:
        # Copy into tuples so later mutation of the caller's lists can't leak in.
        return cls(
            headers=tuple("" if h is None else str(h) for h in headers),
            rows=tuple(tuple(r) for r in rows),
        )

    def cell(self, row_index: int, column: int | None) -> Any:
        if column is None:
            return None
        row = self.rows[row_index]
        if column >= len(row):
            return None
        return row[column]

    def sample(self, n: int) -> tuple[tuple[Any, ...], ...]:
        return self.rows[: max(0, n)]

    def __len__(self) -> int:
        return len(self.rows)


# ---------------------------------------------------------------------------
# Roles, conventions, mapping
# ---------------------------------------------------------------------------


class ColumnRole(StrEnum):
    """Semantic role a source column can play."""

    DATE = "date"
    DESCRIPTION = "description"
    SECONDARY_DESCRIPTION = "secondary_description"
    AMOUNT = "amount"
    DEBIT_AMOUNT = "debit_amount"
    CREDIT_AMOUNT = "credit_amount"


class StatementConvention(StrEnum):
    """Sign convention of a single signed amount column.

    ``BANK``: positive = money out of the account.
    ``CARD``: positive = money in (payments/refunds on a card export).
    """

    BANK = "bank"
    CARD = "card"

    @classmethod
    def parse(cls, text: str | StatementConvention) -> StatementConvention:
        if isinstance(text, StatementConvention):
            return text
        key = str(text).strip().lower().replace("_", "-")
        aliases = {
            "bank": cls.BANK,
            "bank-style": cls.BANK,
            "positive-out": cls.BANK,
            "card": cls.CARD,
            "card-style": cls.CARD,
            "positive-in": cls.CARD,
        }
        try:
            return aliases[key]
        except KeyError:
            raise ValueError(f"unknown statement convention: {text!r}") from None


class ColumnMapping(BaseModel):
    """Column index per role; ``None`` means unassigned.

    Invariant: ``debit_amount`` and ``credit_amount`` are set together or not
    at all. A mapping with no monetary column at all is still valid; rows
    processed with it are reported as ``AmountUnmapped``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    date: int | None = Field(default=None, ge=0)
    description: int | None = Field(default=None, ge=0)
    secondary_description: int | None = Field(default=None, ge=0)
    amount: int | None = Field(default=None, ge=0)
    debit_amount: int | None = Field(default=None, ge=0)
    credit_amount: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _debit_credit_paired(self) -> ColumnMapping:
        if (self.debit_amount is None) != (self.credit_amount is None):
            raise ValueError("debit_amount and credit_amount must be assigned together")
        return self

    def get(self, role: ColumnRole | str) -> int | None:
        return getattr(self, ColumnRole(role).value)

    @property
    def has_debit_credit_pair(self) -> bool:
        return self.debit_amount is not None and self.credit_amount is not None

    def assigned(self) -> dict[ColumnRole, int]:
        """Return ``role -> index`` for assigned roles, in role order."""

        out: dict[ColumnRole, int] = {}
        for role in ColumnRole:
            idx = self.get(role)
            if idx is not None:
                out[role] = idx
        return out

    def with_overrides(self, overrides: Mapping[ColumnRole | str, int | None]) -> ColumnMapping:
        """Return a new mapping with ``overrides`` applied on top of this one.

        Keys are roles (or their string values); ``None`` unassigns a role.
        The result is re-validated, so a half-set debit/credit pair raises
        ``ValueError``.
        """

        data = self.model_dump()
        for role, idx in overrides.items():
            data[ColumnRole(role).value] = idx
        return ColumnMapping.model_validate(data)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class RowError(StrEnum):
    """Row-scoped problems. None of them stops a batch."""

    DATE_UNMAPPED = "DateUnmapped"
    DATE_INVALID = "DateInvalid"
    AMOUNT_UNMAPPED = "AmountUnmapped"

    @property
    def message(self) -> str:
        return _ROW_ERROR_MESSAGES[self]


_ROW_ERROR_MESSAGES: dict[RowError, str] = {
    RowError.DATE_UNMAPPED: "Date column not mapped",
    RowError.DATE_INVALID: "Invalid date format",
    RowError.AMOUNT_UNMAPPED: "No amount columns mapped",
}


class ResolvedAmounts(NamedTuple):
    """Ledger-side amounts for one row, plus the row error when unresolvable."""

    debit_amount: Decimal
    credit_amount: Decimal
    error: RowError | None = None


@dataclass(frozen=True, slots=True)
class NormalizedTransaction:
    """One normalized transaction candidate per source row.

    ``debit_amount`` and ``credit_amount`` are non-negative and at most one of
    them is non-zero. ``date`` is ``YYYY-MM-DD`` or empty when it could not be
    determined.
    """

    source_row_index: int
    date: str
    description: str
    secondary_description: str
    debit_amount: Decimal
    credit_amount: Decimal
    is_valid: bool
    errors: tuple[RowError, ...] = ()

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    @property
    def amount(self) -> Decimal:
        # Display net: debit positive, credit negative.
        return self.debit_amount if self.debit_amount > 0 else -self.credit_amount

    @property
    def full_description(self) -> str:
        return " ".join(p for p in (self.description, self.secondary_description) if p)


__all__ = [
    "ColumnMapping",
    "ColumnRole",
    "NormalizedTransaction",
    "RawTable",
    "ResolvedAmounts",
    "RowError",
    "StatementConvention",
]
