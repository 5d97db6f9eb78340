# ruff: noqa: I001
"""CLI for the ``statement_ingest`` package.

Exposes callable command handlers (``cmd_suggest_mapping``,
``cmd_normalize``) and a Typer-based console interface around them.
Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. All normalization logic lives in
``statement_ingest.api`` and the modules it re-exports; this module only reads
files, resolves options and prints.

Environment
-----------
- ``STATEMENT_INGEST_LOG_LEVEL``: log level for the package logger.
- ``SI_STATEMENT_CONVENTION``: default ``--convention`` (``bank``/``card``).
- ``SI_CLASSIFIER_SAMPLE_ROWS``: default ``--sample-rows``.
"""

from __future__ import annotations

import csv
import json
import os
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .api import NormalizationResult, apply_overrides, normalize_table, suggest_mapping
from .classifier import DEFAULT_SAMPLE_SIZE
from .ingest.csv_table import load_raw_table
from .logging_setup import configure_logging, get_logger
from .models import ColumnMapping, ColumnRole, RawTable, StatementConvention
from .review import summarize, to_import_records

logger = get_logger("statement_ingest.cli")

CONVENTION_ENV = "SI_STATEMENT_CONVENTION"
SAMPLE_ROWS_ENV = "SI_CLASSIFIER_SAMPLE_ROWS"
_MAX_SAMPLE_ROWS = 500


# ---- Small module-level helpers used by CLI commands -------------------------


def _resolve_sample_rows(value: int | None) -> int:
    """Resolve the classifier sample size.

    An explicit positive value wins; otherwise ``SI_CLASSIFIER_SAMPLE_ROWS``
    when it is a positive integer; otherwise the library default. Capped at
    500.
    """

    if value is not None and value > 0:
        return min(value, _MAX_SAMPLE_ROWS)
    env_val = os.getenv(SAMPLE_ROWS_ENV)
    try:
        n = int(env_val) if env_val else None
    except ValueError:
        logger.warning("ignoring invalid %s=%r", SAMPLE_ROWS_ENV, env_val)
        n = None
    if n is not None and n > 0:
        return min(n, _MAX_SAMPLE_ROWS)
    return DEFAULT_SAMPLE_SIZE


def _resolve_convention(value: str | None) -> StatementConvention:
    raw = value or os.getenv(CONVENTION_ENV) or StatementConvention.BANK.value
    return StatementConvention.parse(raw)


def _load_table(csv_path: str) -> RawTable | None:
    """Load ``csv_path`` or print an error to stderr and return ``None``."""

    try:
        return load_raw_table(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
    except UnicodeDecodeError as e:
        print(f"Error: '{csv_path}' is not UTF-8 text: {e}", file=sys.stderr)
    except csv.Error as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
    return None


def _mapping_json(mapping: ColumnMapping, headers: tuple[str, ...]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for role in ColumnRole:
        idx = mapping.get(role)
        if idx is None:
            out[role.value] = None
        else:
            header = headers[idx] if idx < len(headers) else None
            out[role.value] = {"index": idx, "header": header}
    return out


def _render_table(console: Console, result: NormalizationResult, *, valid_only: bool) -> None:
    table = Table(show_lines=False)
    table.add_column("Row", justify="right")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Debit", justify="right")
    table.add_column("Credit", justify="right")
    table.add_column("Status")
    for t in result.transactions:
        if valid_only and not t.is_valid:
            continue
        status = "ok" if t.is_valid else "; ".join(t.messages)
        table.add_row(
            str(t.source_row_index),
            t.date,
            t.full_description,
            f"{t.debit_amount:.2f}",
            f"{t.credit_amount:.2f}",
            status,
        )
    console.print(table)


# ---- Command handlers ---------------------------------------------------------


def cmd_suggest_mapping(csv_path: str, *, sample_rows: int | None = None) -> int:
    """Print the suggested column mapping for ``csv_path`` as JSON.

    Returns ``0`` on success and ``1`` when the file can't be read.
    """

    table = _load_table(csv_path)
    if table is None:
        return 1
    mapping = suggest_mapping(table, sample_size=_resolve_sample_rows(sample_rows))
    print(json.dumps(_mapping_json(mapping, table.headers), indent=2))
    return 0


def cmd_normalize(
    csv_path: str,
    *,
    convention: str | None = None,
    overrides: dict[ColumnRole, str | None] | None = None,
    output_format: str = "table",
    valid_only: bool = False,
    sample_rows: int | None = None,
) -> int:
    """Classify, apply overrides, and print normalized transactions.

    ``overrides`` values are column indices or header names (as typed on the
    command line). ``output_format`` is ``table`` (rich table and a summary
    line) or ``json`` (one object per transaction, errors included).
    """

    try:
        conv = _resolve_convention(convention)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if output_format not in {"table", "json"}:
        print(f"Error: unknown format: {output_format!r}", file=sys.stderr)
        return 1

    table = _load_table(csv_path)
    if table is None:
        return 1

    try:
        mapping = suggest_mapping(table, sample_size=_resolve_sample_rows(sample_rows))
        if overrides:
            mapping = apply_overrides(mapping, overrides, table=table)
    except ValueError as e:
        print(f"Error: invalid column mapping: {e}", file=sys.stderr)
        return 1

    result = normalize_table(table, mapping=mapping, convention=conv)
    summary = summarize(result.transactions)

    if output_format == "json":
        if valid_only:
            payload: Any = to_import_records(result.transactions, source_name=Path(csv_path).name)
        else:
            payload = [
                {
                    "source_row_index": t.source_row_index,
                    "date": t.date,
                    "description": t.description,
                    "secondary_description": t.secondary_description,
                    "debit_amount": f"{t.debit_amount:.2f}",
                    "credit_amount": f"{t.credit_amount:.2f}",
                    "is_valid": t.is_valid,
                    "errors": [str(e) for e in t.errors],
                }
                for t in result.transactions
            ]
        print(json.dumps(payload, indent=2))
        return 0

    console = Console(width=160)
    _render_table(console, result, valid_only=valid_only)
    console.print(
        f"{summary.valid} of {summary.total} rows valid "
        f"(debits {summary.total_debits:.2f}, credits {summary.total_credits:.2f}, "
        f"convention {result.convention})",
        highlight=False,
    )
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Detect columns in bank/card statement CSV exports and normalize rows "
        "into ledger debit/credit entries."
    ),
)


# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a statement CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
    readable=True,
)


@app.command("suggest-mapping")
def suggest_mapping_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    sample_rows: int | None = typer.Option(
        None, help=f"Rows sampled for content detection (env {SAMPLE_ROWS_ENV})."
    ),
) -> None:
    """Print the suggested column-role mapping as JSON."""

    raise typer.Exit(cmd_suggest_mapping(str(csv_path), sample_rows=sample_rows))


@app.command("normalize")
def normalize_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    convention: str | None = typer.Option(
        None,
        help=f"Single-amount sign convention: bank or card (env {CONVENTION_ENV}).",
    ),
    date: str | None = typer.Option(None, "--date", help="Date column (index or header)."),
    description: str | None = typer.Option(
        None, "--description", help="Description column (index or header)."
    ),
    secondary_description: str | None = typer.Option(
        None, "--secondary-description", help="Second description column."
    ),
    amount: str | None = typer.Option(None, "--amount", help="Signed amount column."),
    debit: str | None = typer.Option(None, "--debit", help="Source debit column."),
    credit: str | None = typer.Option(None, "--credit", help="Source credit column."),
    output_format: str = typer.Option("table", "--format", help="table or json."),
    valid_only: bool = typer.Option(False, "--valid-only", help="Only show valid rows."),
    sample_rows: int | None = typer.Option(
        None, help=f"Rows sampled for content detection (env {SAMPLE_ROWS_ENV})."
    ),
) -> None:
    """Normalize a statement CSV, optionally overriding detected columns."""

    given = {
        ColumnRole.DATE: date,
        ColumnRole.DESCRIPTION: description,
        ColumnRole.SECONDARY_DESCRIPTION: secondary_description,
        ColumnRole.AMOUNT: amount,
        ColumnRole.DEBIT_AMOUNT: debit,
        ColumnRole.CREDIT_AMOUNT: credit,
    }
    overrides = {role: ref for role, ref in given.items() if ref is not None}
    raise typer.Exit(
        cmd_normalize(
            str(csv_path),
            convention=convention,
            overrides=overrides,
            output_format=output_format,
            valid_only=valid_only,
            sample_rows=sample_rows,
        )
    )


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already set in the environment.
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()
