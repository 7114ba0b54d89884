"""
Ledger aggregation for What's My Share

Folds expenses and confirmed settlements into per-member balances that the
debt simplifier consumes.
"""
from __future__ import annotations
import logging
import uuid
from datetime import date
from typing import Dict, Iterable, List, Optional

from debt_simplifier import simplify
from errors import InvalidInputError
from models import Expense, Group, SettlementRecord, SplitStrategy, is_money
from split_calculator import calculate_split
from utils import parse_date, today_str

logger = logging.getLogger(__name__)


def build_expense(
    amount: int,
    paid_by: Dict[str, int],
    strategy: SplitStrategy,
    description: str = "",
    expense_date: Optional[str] = None,
    display_names: Optional[Dict[str, str]] = None,
    expense_id: Optional[str] = None,
    notes: str = "",
) -> Expense:
    """Create an expense whose splits come from the given strategy"""
    if not paid_by:
        raise InvalidInputError("An expense needs at least one payer")
    for p, v in paid_by.items():
        if not is_money(v) or v < 0:
            raise InvalidInputError(f"Paid amount for {p} must be a non-negative int")
    paid = sum(paid_by.values())
    if paid != amount:
        raise InvalidInputError(f"Payers cover {paid}, expense total is {amount}")

    splits = calculate_split(amount, strategy, display_names)
    return Expense(
        id=expense_id or str(uuid.uuid4()),
        date=expense_date or today_str(),
        description=description,
        amount=amount,
        paid_by=dict(paid_by),
        splits=splits,
        split_type=strategy.split_type,
        notes=notes,
    )


def expense_balances(e: Expense) -> Dict[str, int]:
    """Net effect of one expense: payers gain, split members lose"""
    balances: Dict[str, int] = {}
    for p, v in e.paid_by.items():
        balances[p] = balances.get(p, 0) + v
    for s in e.splits:
        balances[s.participant] = balances.get(s.participant, 0) - s.amount
    return balances


def compute_balances(
    expenses: Iterable[Expense],
    settlements: Iterable[SettlementRecord] = (),
) -> Dict[str, int]:
    """
    Compute net balances from expenses and settlement records.
    Only confirmed settlements count; a payment moves the debtor up and the
    creditor down by the settled amount.
    """
    balances: Dict[str, int] = {}
    n_exp = 0
    for e in expenses:
        n_exp += 1
        for p, v in expense_balances(e).items():
            balances[p] = balances.get(p, 0) + v

    for s in settlements:
        if s.status != "confirmed":
            continue
        balances[s.debtor] = balances.get(s.debtor, 0) + s.amount
        balances[s.creditor] = balances.get(s.creditor, 0) - s.amount

    logger.debug("Balances computed from %d expenses for %d members", n_exp, len(balances))
    return balances


def compute_debts(e: Expense) -> Dict[str, Dict[str, int]]:
    """Who owes whom for a single expense: debtor -> {creditor: amount}"""
    debts: Dict[str, Dict[str, int]] = {}
    balances = expense_balances(e)
    if not any(balances.values()):
        return debts
    for t in simplify(balances):
        debts.setdefault(t.debtor, {})[t.creditor] = t.amount
    return debts


def filter_expenses_by_date(
    expenses: List[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by date range"""
    out = []
    for e in expenses:
        ed = parse_date(e.date)
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def compute_summary(
    group: Group,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> Dict[str, dict]:
    """
    Compute summary figures for each member.
    Returns dict mapping member -> {paid, owed, settled_out, settled_in, net}
    """
    members = list(group.members)
    exps = filter_expenses_by_date(group.expenses, start, end)

    # people that appear in expenses but were removed from the member list
    for e in exps:
        for p in list(e.paid_by) + [s.participant for s in e.splits]:
            if p not in members:
                members.append(p)

    paid = {p: 0 for p in members}
    owed = {p: 0 for p in members}
    settled_out = {p: 0 for p in members}
    settled_in = {p: 0 for p in members}

    for e in exps:
        for p, v in e.paid_by.items():
            paid[p] += v
        for s in e.splits:
            owed[s.participant] += s.amount

    for s in group.settlements:
        if s.status != "confirmed":
            continue
        sd = parse_date(s.date)
        if (start and sd < start) or (end and sd > end):
            continue
        settled_out.setdefault(s.debtor, 0)
        settled_in.setdefault(s.creditor, 0)
        settled_out[s.debtor] += s.amount
        settled_in[s.creditor] += s.amount

    people = list(dict.fromkeys(members + list(settled_out) + list(settled_in)))
    return {
        p: {
            "paid": paid.get(p, 0),
            "owed": owed.get(p, 0),
            "settled_out": settled_out.get(p, 0),
            "settled_in": settled_in.get(p, 0),
            "net": paid.get(p, 0) - owed.get(p, 0) + settled_out.get(p, 0) - settled_in.get(p, 0),
        } for p in people
    }
