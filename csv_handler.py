"""
CSV export and import functionality for What's My Share
"""
from __future__ import annotations
import csv
from typing import Dict, List

from computations import build_expense
from errors import InvalidInputError
from models import EqualSplit, ExactSplit, Expense, PercentageSplit, SharesSplit, Transfer

EXPENSE_COLUMNS = ['id', 'date', 'description', 'amount', 'paid_by', 'split_type', 'weights', 'notes']


def _pairs_to_str(d: Dict) -> str:
    return ';'.join([f"{k}:{v}" for k, v in d.items()])


def _str_to_pairs(s: str) -> Dict[str, str]:
    out = {}
    for pair in s.split(';'):
        if ':' in pair:
            k, v = pair.split(':', 1)
            out[k.strip()] = v.strip()
    return out


def _weights_for(e: Expense) -> str:
    if e.split_type == 'equal':
        return ';'.join(s.participant for s in e.splits)
    if e.split_type == 'percentage':
        return _pairs_to_str({s.participant: s.percentage for s in e.splits})
    if e.split_type == 'shares':
        return _pairs_to_str({s.participant: s.shares for s in e.splits})
    return _pairs_to_str({s.participant: s.amount for s in e.splits})


def _strategy_for(split_type: str, weights: str):
    if split_type == 'equal':
        return EqualSplit([p.strip() for p in weights.split(';') if p.strip()])
    pairs = _str_to_pairs(weights)
    if split_type == 'exact':
        return ExactSplit({k: int(v) for k, v in pairs.items()})
    if split_type == 'percentage':
        return PercentageSplit({k: float(v) for k, v in pairs.items()})
    if split_type == 'shares':
        return SharesSplit({k: int(v) for k, v in pairs.items()})
    raise InvalidInputError(f"Unknown split type: {split_type!r}")


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: id, date, description, amount, paid_by, split_type, weights, notes
    Amounts are minor units; the split is stored as its weights, not its result.
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(EXPENSE_COLUMNS)
        for e in expenses:
            writer.writerow([
                e.id,
                e.date,
                e.description,
                e.amount,
                _pairs_to_str(e.paid_by),
                e.split_type,
                _weights_for(e),
                e.notes
            ])


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Splits are recomputed from the stored weights.
    """
    expenses = []
    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            paid_by = {k: int(v) for k, v in _str_to_pairs(row['paid_by']).items()}
            strategy = _strategy_for(row['split_type'], row['weights'])
            expenses.append(build_expense(
                amount=int(row['amount']),
                paid_by=paid_by,
                strategy=strategy,
                description=row.get('description', ''),
                expense_date=row['date'],
                expense_id=row['id'],
                notes=row.get('notes', '')
            ))
    return expenses


def import_balances_from_csv(filepath: str) -> Dict[str, int]:
    """
    Import a balance map from CSV file
    CSV columns: participant, balance (signed minor units)
    """
    balances: Dict[str, int] = {}
    with open(filepath, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            p = row['participant'].strip()
            if p in balances:
                raise InvalidInputError(f"Participant {p} listed twice")
            balances[p] = int(row['balance'])
    return balances


def export_transfers_to_csv(transfers: List[Transfer], filepath: str) -> None:
    """Export transfers to CSV file (debtor, creditor, amount)"""
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['debtor', 'creditor', 'amount'])
        for t in transfers:
            writer.writerow([t.debtor, t.creditor, t.amount])
