from datetime import date

import pytest

from computations import (
    build_expense,
    compute_balances,
    compute_debts,
    compute_summary,
    expense_balances,
    filter_expenses_by_date,
)
from errors import InvalidInputError
from models import EqualSplit, ExactSplit, Group, SettlementRecord


def _dinner():
    return build_expense(10000, {"A": 10000}, EqualSplit(["A", "B"]),
                         description="Dinner", expense_date="2024-03-01", expense_id="e1")


def _taxi():
    return build_expense(6000, {"B": 6000}, EqualSplit(["A", "B"]),
                         description="Taxi", expense_date="2024-03-05", expense_id="e2")


def test_build_expense_uses_strategy():
    e = _dinner()
    assert [(s.participant, s.amount) for s in e.splits] == [("A", 5000), ("B", 5000)]
    assert e.split_type == "equal"
    assert e.id == "e1"


def test_build_expense_generates_id_and_date():
    e = build_expense(300, {"A": 300}, ExactSplit({"A": 100, "B": 200}))
    assert e.id
    assert e.date
    assert e.split_type == "exact"


def test_build_expense_payers_must_cover_total():
    with pytest.raises(InvalidInputError):
        build_expense(10000, {"A": 9000}, EqualSplit(["A", "B"]))
    with pytest.raises(InvalidInputError):
        build_expense(10000, {}, EqualSplit(["A", "B"]))


def test_expense_balances():
    assert expense_balances(_dinner()) == {"A": 5000, "B": -5000}


def test_balances_from_multiple_expenses():
    balances = compute_balances([_dinner(), _taxi()])
    assert balances == {"A": 2000, "B": -2000}
    assert sum(balances.values()) == 0


def test_confirmed_settlements_reduce_debt():
    paid = SettlementRecord("s1", "2024-03-02", "B", "A", 5000, status="confirmed")
    assert compute_balances([_dinner()], [paid]) == {"A": 0, "B": 0}


def test_pending_settlements_are_ignored():
    pending = SettlementRecord("s1", "2024-03-02", "B", "A", 5000)
    assert compute_balances([_dinner()], [pending]) == {"A": 5000, "B": -5000}


def test_no_expenses_gives_empty_balances():
    assert compute_balances([]) == {}


def test_compute_debts_for_one_expense():
    e = build_expense(9000, {"A": 9000}, EqualSplit(["A", "B", "C"]))
    assert compute_debts(e) == {"B": {"A": 3000}, "C": {"A": 3000}}


def test_compute_debts_when_payer_is_only_member():
    e = build_expense(500, {"A": 500}, EqualSplit(["A"]))
    assert compute_debts(e) == {}


def test_filter_expenses_by_date():
    exps = [_dinner(), _taxi()]
    assert [e.id for e in filter_expenses_by_date(exps, date(2024, 3, 2), None)] == ["e2"]
    assert [e.id for e in filter_expenses_by_date(exps, None, date(2024, 3, 1))] == ["e1"]
    assert len(filter_expenses_by_date(exps, None, None)) == 2


def test_compute_summary():
    group = Group(
        name="Trip",
        members=["A", "B"],
        expenses=[_dinner(), _taxi()],
        settlements=[SettlementRecord("s1", "2024-03-06", "B", "A", 1000, status="confirmed")],
    )
    summary = compute_summary(group)
    assert summary["A"] == {"paid": 10000, "owed": 8000, "settled_out": 0, "settled_in": 1000, "net": 1000}
    assert summary["B"] == {"paid": 6000, "owed": 8000, "settled_out": 1000, "settled_in": 0, "net": -1000}


def test_compute_summary_includes_non_members():
    e = build_expense(900, {"A": 900}, EqualSplit(["A", "B", "C"]), expense_date="2024-01-01")
    summary = compute_summary(Group(name="g", members=["A"], expenses=[e]))
    assert list(summary) == ["A", "B", "C"]
    assert sum(s["net"] for s in summary.values()) == 0


def test_compute_summary_date_range():
    group = Group(name="Trip", members=["A", "B"], expenses=[_dinner(), _taxi()])
    summary = compute_summary(group, start=date(2024, 3, 2))
    assert summary["A"]["net"] == -3000
    assert summary["B"]["net"] == 3000
