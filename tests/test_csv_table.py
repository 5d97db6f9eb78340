# ruff: noqa: E501
from __future__ import annotations

import csv
import textwrap
from pathlib import Path

import pytest

from statement_ingest.ingest.csv_table import load_raw_table, read_raw_table


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_read_raw_table_basic():
    table = read_raw_table(
        _dedent(
            """
            Date,Description,Amount,Balance

            01/02/2025,"WITHDRAWAL ACH AMEX EPAYMENT, ID 0005000040",($4556.29),$25708.51
            01/06/2025,VERIZON,($89.99),$25618.52
            """
        )
    )
    assert table.headers == ("Date", "Description", "Amount", "Balance")
    assert len(table) == 2
    assert table.rows[0][1] == "WITHDRAWAL ACH AMEX EPAYMENT, ID 0005000040"
    assert table.rows[1] == ("01/06/2025", "VERIZON", "($89.99)", "$25618.52")


def test_read_raw_table_strips_bom_and_header_whitespace():
    table = read_raw_table("\ufeff Date , Amount\n2024-01-01,1\n")
    assert table.headers == ("Date", "Amount")


def test_read_raw_table_without_header():
    with pytest.raises(csv.Error):
        read_raw_table("\n , \n")


def test_load_raw_table(tmp_path: Path):
    p = tmp_path / "stmt.csv"
    p.write_text("\ufeffDate,Debit,Credit\n2024-01-01,,5\n", encoding="utf-8")
    table = load_raw_table(p)
    assert table.headers == ("Date", "Debit", "Credit")
    assert table.rows == (("2024-01-01", "", "5"),)
