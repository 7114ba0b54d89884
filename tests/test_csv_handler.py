import pytest

from computations import build_expense
from csv_handler import (
    export_expenses_to_csv,
    export_transfers_to_csv,
    import_balances_from_csv,
    import_expenses_from_csv,
)
from errors import InvalidInputError
from models import EqualSplit, ExactSplit, PercentageSplit, SharesSplit, Transfer


def test_expenses_survive_export_and_import(tmp_path):
    expenses = [
        build_expense(10000, {"A": 10000}, EqualSplit(["A", "B", "C"]),
                      description="Groceries", expense_date="2024-04-01", expense_id="e1"),
        build_expense(12000, {"B": 7000, "C": 5000}, SharesSplit({"A": 2, "B": 1}),
                      description="Hotel", expense_date="2024-04-02", expense_id="e2", notes="two nights"),
        build_expense(999, {"C": 999}, PercentageSplit({"A": 33.3, "C": 66.7}),
                      expense_date="2024-04-03", expense_id="e3"),
        build_expense(500, {"A": 500}, ExactSplit({"B": 200, "C": 300}),
                      expense_date="2024-04-04", expense_id="e4"),
    ]
    path = tmp_path / "expenses.csv"
    export_expenses_to_csv(expenses, str(path))
    imported = import_expenses_from_csv(str(path))
    assert imported == expenses


def test_import_balances(tmp_path):
    path = tmp_path / "balances.csv"
    path.write_text("participant,balance\nA,-10000\nB,-5000\nC,15000\n", encoding="utf-8")
    assert import_balances_from_csv(str(path)) == {"A": -10000, "B": -5000, "C": 15000}


def test_import_balances_rejects_duplicates(tmp_path):
    path = tmp_path / "balances.csv"
    path.write_text("participant,balance\nA,-100\nA,100\n", encoding="utf-8")
    with pytest.raises(InvalidInputError):
        import_balances_from_csv(str(path))


def test_unknown_split_type_on_import(tmp_path):
    path = tmp_path / "expenses.csv"
    path.write_text(
        "id,date,description,amount,paid_by,split_type,weights,notes\n"
        "e1,2024-01-01,x,100,A:100,lottery,A;B,\n",
        encoding="utf-8",
    )
    with pytest.raises(InvalidInputError):
        import_expenses_from_csv(str(path))


def test_export_transfers(tmp_path):
    path = tmp_path / "transfers.csv"
    export_transfers_to_csv([Transfer("A", "C", 10000), Transfer("B", "C", 5000)], str(path))
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["debtor,creditor,amount", "A,C,10000", "B,C,5000"]
