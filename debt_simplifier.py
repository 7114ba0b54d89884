"""
Debt simplification for What's My Share

Greedy matching of the largest creditor with the largest debtor. Each round
settles at least one party completely, so n non-zero balances need at most
n - 1 transfers. Ties on amount go to the lexicographically smallest
participant id, which keeps the output reproducible.
"""
from __future__ import annotations
import logging
import warnings
from typing import Dict, List, Optional

from errors import InvalidInputError, NonZeroSumBalanceWarning
from models import ExplanationStep, SimplificationResult, Transfer, is_money
from utils import CURRENCY_SYMBOL, DECIMAL_PLACES, format_amount

logger = logging.getLogger(__name__)

CONFIRMATION_THRESHOLD = 500000  # ₹5000


def _largest(side: Dict[str, int]) -> str:
    return min(side, key=lambda p: (-side[p], p))


def _settle(balances: Dict[str, int], stacklevel: int) -> SimplificationResult:
    # stacklevel counts from warnings.warn up to the public caller
    if not balances:
        raise InvalidInputError("Cannot simplify an empty balance map")
    for p, v in balances.items():
        if not is_money(v):
            raise InvalidInputError(f"Balance for {p} must be an int of minor units, got {v!r}")

    logger.info("Simplifying debts for %d participants", len(balances))

    # working copies owned by this call
    creditors = {p: v for p, v in balances.items() if v > 0}
    debtors = {p: -v for p, v in balances.items() if v < 0}
    logger.debug("Categorized: %d creditors, %d debtors", len(creditors), len(debtors))

    transfers = []
    while creditors and debtors:
        cname = _largest(creditors)
        dname = _largest(debtors)
        amount = min(creditors[cname], debtors[dname])

        logger.debug("Transfer %s -> %s: %d", dname, cname, amount)
        transfers.append(Transfer(debtor=dname, creditor=cname, amount=amount))

        creditors[cname] -= amount
        debtors[dname] -= amount
        if creditors[cname] == 0:
            del creditors[cname]
        if debtors[dname] == 0:
            del debtors[dname]

    residual = dict(creditors)
    residual.update({p: -v for p, v in debtors.items()})
    if residual:
        net = sum(balances.values())
        logger.warning(
            "Balances do not sum to zero (net %d); unsettled: %s", net, residual
        )
        warnings.warn(
            f"Balances do not sum to zero (net {net}); {len(residual)} left unsettled",
            NonZeroSumBalanceWarning,
            stacklevel=stacklevel,
        )

    logger.info("Debt simplification complete: %d transfers", len(transfers))
    return SimplificationResult(transfers=tuple(transfers), residual=residual)


def settle(balances: Dict[str, int]) -> SimplificationResult:
    """
    Compute transfers that settle `balances` (positive = owed, negative = owes).
    Input that does not net to zero still terminates; the unsettled part is
    returned as the residual and reported with a NonZeroSumBalanceWarning.
    """
    return _settle(balances, stacklevel=3)


def simplify(balances: Dict[str, int]) -> List[Transfer]:
    """Minimal ordered list of transfers settling `balances`"""
    return list(_settle(balances, stacklevel=3).transfers)


def naive_transfer_count(balances: Dict[str, int]) -> int:
    """Worst case without simplification: every debtor pays every creditor"""
    creditors = sum(1 for v in balances.values() if v > 0)
    debtors = sum(1 for v in balances.values() if v < 0)
    return creditors * debtors


def requires_confirmation(amount: int, threshold: int = CONFIRMATION_THRESHOLD) -> bool:
    """High-value settlements need an extra confirmation from the payer"""
    return amount >= threshold


def _describe_balances(
    balances: Dict[str, int],
    names: Dict[str, str],
    symbol: str,
    decimals: int,
) -> str:
    lines = []
    for p, v in balances.items():
        name = names.get(p, p)
        if v > 0:
            lines.append(f"{name} is owed {format_amount(v, symbol, decimals)}")
        elif v < 0:
            lines.append(f"{name} owes {format_amount(-v, symbol, decimals)}")
        else:
            lines.append(f"{name} is settled")
    total = sum(balances.values())
    lines.append("-" * 17)
    if total == 0:
        lines.append(f"Total: {format_amount(0, symbol, decimals)} ✓")
    else:
        lines.append(f"Total: {format_amount(total, symbol, decimals)} (should be 0)")
    return "\n".join(lines)


def generate_explanation(
    balances: Dict[str, int],
    display_names: Optional[Dict[str, str]] = None,
    symbol: str = CURRENCY_SYMBOL,
    decimals: int = DECIMAL_PLACES,
) -> List[ExplanationStep]:
    """
    Narrate a simplification step by step for a "show your work" view.

    Steps: the original balances, who owes and who is owed, one step per
    transfer produced by simplify() with the running balances after it, and
    a closing summary. Missing display names fall back to the participant id.
    """
    names = dict(display_names or {})
    transfers = list(_settle(balances, stacklevel=3).transfers)

    steps = [
        ExplanationStep(
            title="Original Balances",
            description=_describe_balances(balances, names, symbol, decimals),
            balances=dict(balances),
        )
    ]

    owed = [names.get(p, p) for p, v in balances.items() if v > 0]
    owing = [names.get(p, p) for p, v in balances.items() if v < 0]
    steps.append(
        ExplanationStep(
            title="Categorize Members",
            description=(
                f"Owed money: {', '.join(owed) if owed else 'None'}\n"
                f"Owes money: {', '.join(owing) if owing else 'None'}"
            ),
            balances=dict(balances),
        )
    )

    running = dict(balances)
    for i, t in enumerate(transfers, start=1):
        running[t.debtor] += t.amount
        running[t.creditor] -= t.amount
        steps.append(
            ExplanationStep(
                title=f"Step {i}: {names.get(t.debtor, t.debtor)} pays {names.get(t.creditor, t.creditor)}",
                description=(
                    f"Amount: {format_amount(t.amount, symbol, decimals)}\n\n"
                    + _describe_balances(running, names, symbol, decimals)
                ),
                balances=dict(running),
                transfer=t,
            )
        )

    n = len(transfers)
    steps.append(
        ExplanationStep(
            title="Result",
            description=(
                f"Simplified to {n} payment{'' if n == 1 else 's'} "
                f"(from potentially {naive_transfer_count(balances)})"
            ),
            balances=dict(running),
        )
    )

    logger.debug("Explanation generated with %d steps", len(steps))
    return steps
