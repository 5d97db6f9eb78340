"""Public API for the ``statement_ingest`` package.

Typical flow for an upload screen:

1. ``mapping = suggest_mapping(table)`` and show it to the user.
2. The user edits roles; ``mapping = apply_overrides(mapping, edits, table=table)``.
3. ``transactions = process(table, mapping, convention)`` for the preview.
4. Repeat 2-3 as often as needed. Nothing here keeps state between calls;
   the caller owns the "current mapping".

:func:`normalize_table` bundles steps 1-3 for non-interactive callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias

from .classifier import DEFAULT_SAMPLE_SIZE, classify
from .models import (
    ColumnMapping,
    ColumnRole,
    NormalizedTransaction,
    RawTable,
    StatementConvention,
)
from .processor import process

ColumnRef: TypeAlias = int | str | None
"""A column given by index, by header name, or ``None`` to unassign."""


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Mapping and convention actually used, plus the per-row results."""

    mapping: ColumnMapping
    convention: StatementConvention
    transactions: list[NormalizedTransaction]


def suggest_mapping(table: RawTable, *, sample_size: int = DEFAULT_SAMPLE_SIZE) -> ColumnMapping:
    """Classify ``table``'s columns using its headers and first rows."""

    return classify(table.headers, table.sample(sample_size))


def resolve_column(ref: ColumnRef, headers: tuple[str, ...] | None) -> int | None:
    """Turn a column reference into an index.

    Integers (and digit strings) are indices. Other strings are matched
    against ``headers``, exactly first and then case-insensitively after
    trimming.
    """

    if ref is None or isinstance(ref, int):
        return ref
    s = ref.strip()
    if s.isdigit():
        return int(s)
    if headers is None:
        raise ValueError(f"header name {ref!r} given but no headers are available")
    if s in headers:
        return headers.index(s)
    folded = [h.strip().lower() for h in headers]
    try:
        return folded.index(s.lower())
    except ValueError:
        raise ValueError(f"unknown column header: {ref!r}") from None


def apply_overrides(
    mapping: ColumnMapping,
    overrides: Mapping[ColumnRole | str, ColumnRef],
    *,
    table: RawTable | None = None,
) -> ColumnMapping:
    """Return ``mapping`` with ``overrides`` applied; ``mapping`` is unchanged.

    Override values may be indices, header names (resolved against
    ``table.headers``) or ``None`` to unassign. Raises ``ValueError`` for
    unknown headers or when the result breaks the debit/credit pairing.
    """

    headers = table.headers if table is not None else None
    resolved = {role: resolve_column(ref, headers) for role, ref in overrides.items()}
    return mapping.with_overrides(resolved)


def normalize_table(
    table: RawTable,
    *,
    mapping: ColumnMapping | None = None,
    overrides: Mapping[ColumnRole | str, ColumnRef] | None = None,
    convention: StatementConvention | str = StatementConvention.BANK,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
) -> NormalizationResult:
    """Classify (unless ``mapping`` is given), apply overrides, and process."""

    effective = mapping if mapping is not None else suggest_mapping(table, sample_size=sample_size)
    if overrides:
        effective = apply_overrides(effective, overrides, table=table)
    conv = StatementConvention.parse(convention)
    return NormalizationResult(
        mapping=effective,
        convention=conv,
        transactions=process(table, effective, conv),
    )


__all__ = [
    "ColumnRef",
    "NormalizationResult",
    "apply_overrides",
    "normalize_table",
    "resolve_column",
    "suggest_mapping",
]
