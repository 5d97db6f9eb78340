"""Public interface for the ``statement_ingest`` package.

Re-exports the API functions and public models/types as the stable import
surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import (
    NormalizationResult,
    apply_overrides,
    normalize_table,
    suggest_mapping,
)
from .classifier import classify
from .dates import normalize_date
from .models import (
    ColumnMapping,
    ColumnRole,
    NormalizedTransaction,
    RawTable,
    ResolvedAmounts,
    RowError,
    StatementConvention,
)
from .processor import process, process_row
from .review import ImportSummary, summarize, to_import_records
from .signs import resolve_amounts

__all__ = [
    # API
    "apply_overrides",
    "classify",
    "normalize_date",
    "normalize_table",
    "process",
    "process_row",
    "resolve_amounts",
    "suggest_mapping",
    "summarize",
    "to_import_records",
    # Models / types
    "ColumnMapping",
    "ColumnRole",
    "ImportSummary",
    "NormalizationResult",
    "NormalizedTransaction",
    "RawTable",
    "ResolvedAmounts",
    "RowError",
    "StatementConvention",
]
