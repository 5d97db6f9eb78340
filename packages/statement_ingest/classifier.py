"""Heuristic column classification for unlabeled statement exports.

:func:`classify` suggests a :class:`~statement_ingest.models.ColumnMapping`
from header text, falling back to sampled cell contents for roles the headers
did not settle. It is a small rule engine: an ordered table of keyword rules
evaluated per column, plus a few pure scoring functions. The result is only a
suggestion; callers are expected to let a person confirm or override it.

Header rules (case-insensitive, whitespace-trimmed) in priority order:

- date: contains ``date``; equals ``dt`` / ``trans date``
- description: contains ``description``, ``memo``, ``reference``, ``payee``,
  ``vendor``, ``details``, ``narrative``
- amount: contains ``amount`` (unless it also names a debit or credit
  keyword, so "Withdrawal Amount" is a debit column); equals
  ``amt``, ``transaction amount``, ``net amount``
- debit: contains ``debit``, ``withdrawal``, ``payment``; equals ``dr``;
  has the word ``out``
- credit: contains ``credit``, ``deposit``, ``receipt``; equals ``cr``;
  has the word ``in``

A column takes the first role whose rule it matches and roles are never
overwritten; the second description-like column becomes the secondary
description.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .amounts import to_decimal
from .dates import normalize_date
from .logging_setup import get_logger
from .models import ColumnMapping, ColumnRole

logger = get_logger("statement_ingest.classifier")

DEFAULT_SAMPLE_SIZE = 20
# Minimum fraction of non-empty sampled cells that must fit a role.
CONTENT_THRESHOLD = 0.8

_WORD_RE = re.compile(r"[a-z0-9]+")


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Keyword set for one role.

    ``contains`` match anywhere in the header, ``exact`` must equal the whole
    header and ``words`` must appear as a standalone word (short tokens such as
    ``in`` would otherwise match "Running Balance" or "Institution").
    ``excluded`` (substrings) and ``excluded_words`` (whole words) veto the
    rule.
    """

    role: ColumnRole
    contains: tuple[str, ...] = ()
    exact: tuple[str, ...] = ()
    words: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
    excluded_words: tuple[str, ...] = ()

    def matches(self, header: str) -> bool:
        if any(x in header for x in self.excluded):
            return False
        tokens = set(_WORD_RE.findall(header))
        if any(w in tokens for w in self.excluded_words):
            return False
        if header in self.exact:
            return True
        if any(k in header for k in self.contains):
            return True
        return any(w in tokens for w in self.words)


# Ordered by role priority; the first matching rule claims the column.
HEADER_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        ColumnRole.DATE,
        contains=("date", "transaction date", "posted date", "effective date"),
        exact=("dt", "trans date"),
    ),
    KeywordRule(
        ColumnRole.DESCRIPTION,
        contains=("description", "memo", "reference", "payee", "vendor", "details", "narrative"),
    ),
    KeywordRule(
        ColumnRole.AMOUNT,
        contains=("amount",),
        exact=("amt", "transaction amount", "net amount"),
        excluded=("debit", "credit", "withdrawal", "deposit", "payment", "receipt"),
        excluded_words=("out", "in"),
    ),
    KeywordRule(
        ColumnRole.DEBIT_AMOUNT,
        contains=("debit", "withdrawal", "payment"),
        exact=("dr",),
        words=("out",),
    ),
    KeywordRule(
        ColumnRole.CREDIT_AMOUNT,
        contains=("credit", "deposit", "receipt"),
        exact=("cr",),
        words=("in",),
    ),
)


def match_header(header: str) -> ColumnRole | None:
    """Return the first role whose keyword rule matches ``header``."""

    h = (header or "").strip().lower()
    if not h:
        return None
    for rule in HEADER_RULES:
        if rule.matches(h):
            return rule.role
    return None


# ---------------------------------------------------------------------------
# Content scoring
# ---------------------------------------------------------------------------


def _non_empty(cells: Sequence[Any]) -> list[Any]:
    return [c for c in cells if c is not None and str(c).strip() != ""]


def _fraction(cells: Sequence[Any], pred) -> float:
    values = _non_empty(cells)
    if not values:
        return 0.0
    return sum(1 for v in values if pred(v)) / len(values)


def score_date(cells: Sequence[Any]) -> float:
    return _fraction(cells, lambda v: normalize_date(v) != "")


def score_amount(cells: Sequence[Any]) -> float:
    return _fraction(cells, lambda v: to_decimal(v) is not None)


def score_description(cells: Sequence[Any]) -> float:
    return _fraction(
        cells,
        lambda v: isinstance(v, str) and to_decimal(v) is None and normalize_date(v) == "",
    )


_SCORERS = {
    ColumnRole.DATE: score_date,
    ColumnRole.AMOUNT: score_amount,
    ColumnRole.DESCRIPTION: score_description,
}


def _column(sample_rows: Sequence[Sequence[Any]], idx: int) -> list[Any]:
    return [row[idx] if idx < len(row) else None for row in sample_rows]


def _best_by_content(
    role: ColumnRole,
    candidates: Sequence[int],
    sample_rows: Sequence[Sequence[Any]],
) -> int | None:
    scorer = _SCORERS[role]
    best: tuple[float, int] | None = None
    for idx in candidates:
        score = scorer(_column(sample_rows, idx))
        if score < CONTENT_THRESHOLD:
            continue
        # Strictly greater keeps the lowest index on ties.
        if best is None or score > best[0]:
            best = (score, idx)
    return None if best is None else best[1]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify(
    headers: Sequence[str],
    sample_rows: Sequence[Sequence[Any]] = (),
) -> ColumnMapping:
    """Suggest a column mapping from headers and (optionally) sampled rows.

    Steps:
    1. Header pass over :data:`HEADER_RULES`, first assignment wins.
    2. A lone debit or credit column is dropped; the pair is required.
    3. Content pass for roles still unassigned, using ``sample_rows``.
    4. When the debit/credit pair is present, ``amount`` stays unassigned.
    """

    assigned: dict[ColumnRole, int] = {}
    for idx, header in enumerate(headers):
        role = match_header(header)
        if role is None:
            continue
        if role is ColumnRole.DESCRIPTION and role in assigned:
            role = ColumnRole.SECONDARY_DESCRIPTION
        if role in assigned:
            logger.debug("column %d (%r) matched %s but it is already taken", idx, header, role)
            continue
        assigned[role] = idx

    has_debit = ColumnRole.DEBIT_AMOUNT in assigned
    has_credit = ColumnRole.CREDIT_AMOUNT in assigned
    if has_debit != has_credit:
        lone = ColumnRole.DEBIT_AMOUNT if has_debit else ColumnRole.CREDIT_AMOUNT
        logger.debug("dropping lone %s column %d (no partner)", lone, assigned[lone])
        del assigned[lone]
    pair = has_debit and has_credit

    if sample_rows:
        content_roles = [ColumnRole.DATE]
        if not pair:
            content_roles.append(ColumnRole.AMOUNT)
        content_roles.append(ColumnRole.DESCRIPTION)
        for role in content_roles:
            if role in assigned:
                continue
            taken = set(assigned.values())
            free = [i for i in range(len(headers)) if i not in taken]
            idx = _best_by_content(role, free, sample_rows)
            if idx is not None:
                logger.debug("content pass assigned column %d to %s", idx, role)
                assigned[role] = idx

    if pair:
        assigned.pop(ColumnRole.AMOUNT, None)

    mapping = ColumnMapping(**{role.value: idx for role, idx in assigned.items()})
    logger.debug("suggested mapping: %s", mapping.model_dump(exclude_none=True))
    return mapping


__all__ = [
    "CONTENT_THRESHOLD",
    "DEFAULT_SAMPLE_SIZE",
    "HEADER_RULES",
    "KeywordRule",
    "classify",
    "match_header",
    "score_amount",
    "score_date",
    "score_description",
]
