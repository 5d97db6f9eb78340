"""Build a :class:`~statement_ingest.models.RawTable` from CSV text or a file.

This is the developer-facing reader used by the CLI; the engine itself only
ever sees the resulting table. Parsing follows RFC 4180 via the stdlib
:mod:`csv` module. Every cell stays a string, exactly as exported.
"""

from __future__ import annotations

import csv
from io import StringIO
from os import PathLike
from pathlib import Path

from ..models import RawTable


def read_raw_table(csv_text: str) -> RawTable:
    """Parse ``csv_text``; the first non-blank row is the header.

    Fully blank rows are skipped. Raises ``csv.Error`` when no header row
    exists.
    """

    # Tolerate a UTF-8 BOM left in front of the first header.
    text = csv_text.removeprefix("\ufeff")
    with StringIO(text, newline="") as f:
        reader = csv.reader(f)
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        raise csv.Error("CSV appears to have no header row")
    headers = [h.strip() for h in rows[0]]
    return RawTable.from_rows(headers, rows[1:])


def load_raw_table(csv_path: str | PathLike[str]) -> RawTable:
    """Read ``csv_path`` as UTF-8 (BOM allowed) and parse it."""

    p = Path(csv_path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        return read_raw_table(f.read())


__all__ = ["load_raw_table", "read_raw_table"]
