from __future__ import annotations

from datetime import date
from decimal import Decimal

from statement_ingest.classifier import classify
from statement_ingest.models import (
    ColumnMapping,
    NormalizedTransaction,
    RawTable,
    RowError,
    StatementConvention,
)
from statement_ingest.processor import process, process_row

D = Decimal


def _table() -> RawTable:
    return RawTable.from_rows(
        ["Date", "Description", "Amount", "Note"],
        [
            ["03/15/2024", "Coffee", "4.50", "card 1234"],
            [date(2024, 3, 16), "Refund", "-20", None],
            [45000, "Rent", "$1,200.00", ""],
        ],
    )


def test_single_amount_bank_style():
    table = _table()
    out = process(table, ColumnMapping(date=0, description=1, amount=2))
    assert [t.date for t in out] == ["2024-03-15", "2024-03-16", "2023-03-15"]
    assert [(t.debit_amount, t.credit_amount) for t in out] == [
        (D("4.50"), D(0)),
        (D(0), D(20)),
        (D("1200.00"), D(0)),
    ]
    assert all(t.is_valid and t.errors == () for t in out)
    assert [t.source_row_index for t in out] == [0, 1, 2]


def test_card_style_flips_direction():
    out = process(_table(), ColumnMapping(date=0, description=1, amount=2), "card")
    assert (out[0].debit_amount, out[0].credit_amount) == (D(0), D("4.50"))
    assert (out[1].debit_amount, out[1].credit_amount) == (D(20), D(0))


def test_secondary_description_and_missing_cells():
    mapping = ColumnMapping(date=0, description=1, secondary_description=3, amount=2)
    out = process(_table(), mapping)
    assert out[0].secondary_description == "card 1234"
    assert out[0].full_description == "Coffee card 1234"
    assert out[1].secondary_description == ""
    assert out[1].full_description == "Refund"


def test_process_is_repeatable_and_does_not_touch_input():
    headers = ["Date", "Description", "Debit", "Credit"]
    rows = [["2024-01-02", "Paycheck", "", "2,000.00"], ["2024-01-03", "Rent", "1500", ""]]
    table = RawTable.from_rows(headers, rows)
    mapping = classify(headers)

    first = process(table, mapping)
    second = process(table, mapping)
    assert first == second
    assert first is not second

    # Mutating the caller's lists afterwards can't reach the table.
    rows[0][3] = "999"
    assert process(table, mapping) == first


def test_reprocess_with_a_different_mapping_is_independent():
    table = _table()
    with_amount = process(table, ColumnMapping(date=0, description=1, amount=2))
    without_date = process(table, ColumnMapping(description=1, amount=2))
    assert all(t.is_valid for t in with_amount)
    assert all(t.errors == (RowError.DATE_UNMAPPED,) for t in without_date)
    # The earlier result is unaffected.
    assert all(t.is_valid for t in with_amount)


def test_invalid_date_marks_only_that_row():
    table = RawTable.from_rows(
        ["Date", "Description", "Amount"],
        [["garbage", "A", "1"], ["2024-01-01", "B", "2"]],
    )
    out = process(table, ColumnMapping(date=0, description=1, amount=2))
    assert out[0].errors == (RowError.DATE_INVALID,)
    assert not out[0].is_valid
    assert out[0].date == ""
    # Amounts are still resolved for the invalid row.
    assert out[0].debit_amount == D(1)
    assert out[1].is_valid


def test_graceful_degradation_without_date_or_amount():
    table = RawTable.from_rows(["Desc"], [["Coffee"], ["Rent"]])
    out = process(table, classify(table.headers, table.rows))
    assert len(out) == 2
    for t in out:
        assert not t.is_valid
        assert RowError.DATE_UNMAPPED in t.errors
        assert RowError.AMOUNT_UNMAPPED in t.errors
        assert "DateUnmapped" in t.errors
        assert "AmountUnmapped" in t.errors
        assert t.messages == ["Date column not mapped", "No amount columns mapped"]
        assert (t.debit_amount, t.credit_amount) == (D(0), D(0))


def test_malformed_debit_with_valid_credit_stays_valid():
    table = RawTable.from_rows(
        ["Date", "Description", "Debit", "Credit"],
        [["2024-02-01", "Deposit", "N/A", "125.00"]],
    )
    (t,) = process(table, ColumnMapping(date=0, description=1, debit_amount=2, credit_amount=3))
    assert t.is_valid
    assert (t.debit_amount, t.credit_amount) == (D("125.00"), D(0))


def test_ragged_rows_and_empty_table():
    table = RawTable.from_rows(["Date", "Description", "Amount"], [["2024-01-01"], []])
    out = process(table, ColumnMapping(date=0, description=1, amount=2))
    assert out[0].description == ""
    assert out[0].is_valid
    assert out[1].errors == (RowError.DATE_INVALID,)

    assert process(RawTable.from_rows(["Date"], []), ColumnMapping(date=0)) == []


def test_accepts_headers_and_rows_pair():
    out = process((["Date", "Amount"], [["2024-01-01", "5"]]), ColumnMapping(date=0, amount=1))
    assert out[0].debit_amount == D(5)


def test_at_most_one_side_non_zero():
    table = RawTable.from_rows(
        ["Date", "Debit", "Credit"],
        [["2024-01-01", "10", "30"], ["2024-01-02", "5", ""], ["2024-01-03", "", "7"]],
    )
    for t in process(table, ColumnMapping(date=0, debit_amount=1, credit_amount=2)):
        assert t.debit_amount >= 0 and t.credit_amount >= 0
        assert t.debit_amount == 0 or t.credit_amount == 0


def test_process_row_matches_process():
    table = _table()
    mapping = ColumnMapping(date=0, description=1, amount=2)
    conv = StatementConvention.BANK
    assert [process_row(table, i, mapping, conv) for i in range(len(table))] == process(
        table, mapping, conv
    )


def test_net_amount_property():
    debit = NormalizedTransaction(0, "2024-01-01", "a", "", D(5), D(0), True)
    credit = NormalizedTransaction(1, "2024-01-01", "b", "", D(0), D(7), True)
    assert debit.amount == D(5)
    assert credit.amount == D(-7)


def test_withdrawal_and_deposit_amount_export_keeps_deposits():
    table = RawTable.from_rows(
        ["Date", "Description", "Withdrawal Amount", "Deposit Amount"],
        [
            ["2024-01-02", "Pay", "", "2000"],
            ["2024-01-03", "Groceries", "85.10", ""],
        ],
    )
    out = process(table, classify(table.headers, table.rows))
    assert [(t.debit_amount, t.credit_amount) for t in out] == [
        (D(2000), D(0)),
        (D(0), D("85.10")),
    ]
    assert all(t.is_valid for t in out)
