from __future__ import annotations

from decimal import Decimal

import pytest

from statement_ingest import (
    ColumnMapping,
    ColumnRole,
    RawTable,
    StatementConvention,
    apply_overrides,
    normalize_table,
    suggest_mapping,
)

D = Decimal


def _table() -> RawTable:
    return RawTable.from_rows(
        ["Posted", "Payee", "Out", "In", "Signed"],
        [
            ["01/02/2024", "Paycheck", "", "2000", "-2000"],
            ["01/03/2024", "Rent", "1500", "", "1500"],
        ],
    )


def test_mapping_requires_debit_and_credit_together():
    with pytest.raises(ValueError):
        ColumnMapping(debit_amount=1)
    with pytest.raises(ValueError):
        ColumnMapping(credit_amount=1)
    assert ColumnMapping(debit_amount=1, credit_amount=2).has_debit_credit_pair


def test_mapping_rejects_negative_indices():
    with pytest.raises(ValueError):
        ColumnMapping(date=-1)


def test_mapping_is_immutable():
    m = ColumnMapping(date=0)
    with pytest.raises(ValueError):
        m.date = 3  # type: ignore[misc]


def test_with_overrides_returns_new_mapping():
    base = ColumnMapping(date=0, amount=4)
    changed = base.with_overrides({ColumnRole.AMOUNT: None, "debit_amount": 2, "credit_amount": 3})
    assert base == ColumnMapping(date=0, amount=4)
    assert changed == ColumnMapping(date=0, debit_amount=2, credit_amount=3)
    assert changed.assigned() == {
        ColumnRole.DATE: 0,
        ColumnRole.DEBIT_AMOUNT: 2,
        ColumnRole.CREDIT_AMOUNT: 3,
    }


def test_with_overrides_rejects_half_pair_and_unknown_role():
    base = ColumnMapping(date=0, amount=4)
    with pytest.raises(ValueError):
        base.with_overrides({ColumnRole.DEBIT_AMOUNT: 2})
    with pytest.raises(ValueError):
        base.with_overrides({"balance": 5})


def test_apply_overrides_resolves_header_names():
    table = _table()
    m = apply_overrides(
        ColumnMapping(),
        {"date": "Posted", "description": "payee", "debit_amount": "Out", "credit_amount": "3"},
        table=table,
    )
    assert m == ColumnMapping(date=0, description=1, debit_amount=2, credit_amount=3)


def test_apply_overrides_unknown_header():
    with pytest.raises(ValueError, match="unknown column header"):
        apply_overrides(ColumnMapping(), {"date": "When"}, table=_table())
    with pytest.raises(ValueError):
        apply_overrides(ColumnMapping(), {"date": "Posted"})


def test_suggestion_then_override_then_reprocess():
    table = _table()
    suggested = suggest_mapping(table)
    # "Out"/"In" are recognised as a debit/credit pair; the rest by content.
    assert (suggested.debit_amount, suggested.credit_amount) == (2, 3)
    assert suggested.date == 0
    assert suggested.description == 1

    first = normalize_table(table, mapping=suggested)
    assert [(t.debit_amount, t.credit_amount) for t in first.transactions] == [
        (D(2000), D(0)),
        (D(0), D(1500)),
    ]

    # User switches to the single signed column with card semantics.
    second = normalize_table(
        table,
        mapping=suggested,
        overrides={"debit_amount": None, "credit_amount": None, "amount": "Signed"},
        convention="card",
    )
    assert second.convention is StatementConvention.CARD
    assert second.mapping.amount == 4
    assert [(t.debit_amount, t.credit_amount) for t in second.transactions] == [
        (D(2000), D(0)),
        (D(0), D(1500)),
    ]
    # The first result and the suggestion are unchanged.
    assert suggested.amount is None
    assert first.mapping == suggested


def test_normalize_table_classifies_when_no_mapping_given():
    table = RawTable.from_rows(["Date", "Description", "Amount"], [["2024-05-01", "X", "3"]])
    result = normalize_table(table)
    assert result.mapping == ColumnMapping(date=0, description=1, amount=2)
    assert result.convention is StatementConvention.BANK
    assert result.transactions[0].debit_amount == D(3)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("bank", StatementConvention.BANK),
        ("Bank-Style", StatementConvention.BANK),
        ("positive-out", StatementConvention.BANK),
        ("CARD", StatementConvention.CARD),
        ("card_style", StatementConvention.CARD),
        ("positive-in", StatementConvention.CARD),
    ],
)
def test_convention_aliases(text, expected):
    assert StatementConvention.parse(text) is expected


def test_unknown_convention():
    with pytest.raises(ValueError):
        StatementConvention.parse("sideways")
