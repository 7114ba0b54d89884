"""
Expense split calculations for What's My Share

Every function returns allocations that sum exactly to the total. Weighted
splits round each share half-up and hand the exact remainder to the last
participant, so rounding drift never creates or loses a minor unit.
"""
from __future__ import annotations
import logging
import warnings
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from errors import ExactSplitMismatchError, InexactInputWarning, InvalidInputError
from models import (
    EqualSplit,
    ExactSplit,
    PercentageSplit,
    SharesSplit,
    SplitAllocation,
    SplitStrategy,
    is_money,
)

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = 0.01


def _check_total(total_amount: int) -> None:
    if not is_money(total_amount):
        raise InvalidInputError(f"Total amount must be an int of minor units, got {total_amount!r}")
    if total_amount < 0:
        raise InvalidInputError(f"Total amount cannot be negative ({total_amount})")


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _name(display_names: Optional[Dict[str, str]], participant: str) -> Optional[str]:
    if display_names is None:
        return None
    return display_names.get(participant, participant)


def calculate_equal(
    total_amount: int,
    participants: List[str],
    display_names: Optional[Dict[str, str]] = None,
) -> List[SplitAllocation]:
    """Split equally; the first `total % n` participants pay one extra unit"""
    _check_total(total_amount)
    participants = EqualSplit(participants).participants

    per_person, remainder = divmod(total_amount, len(participants))
    logger.debug(
        "Equal split: total=%d participants=%d per_person=%d remainder=%d",
        total_amount, len(participants), per_person, remainder,
    )
    return [
        SplitAllocation(
            participant=p,
            amount=per_person + (1 if i < remainder else 0),
            display_name=_name(display_names, p),
        )
        for i, p in enumerate(participants)
    ]


def calculate_exact(
    total_amount: int,
    amounts: Dict[str, int],
    display_names: Optional[Dict[str, str]] = None,
) -> List[SplitAllocation]:
    """Validate caller-supplied amounts against the total"""
    _check_total(total_amount)
    amounts = ExactSplit(amounts).amounts

    allocated = sum(amounts.values())
    if allocated != total_amount:
        logger.warning(
            "Exact split validation failed: allocated=%d expected=%d",
            allocated, total_amount,
        )
        raise ExactSplitMismatchError(allocated, total_amount)

    return [
        SplitAllocation(participant=p, amount=v, display_name=_name(display_names, p))
        for p, v in amounts.items()
    ]


def _weighted(
    total_amount: int,
    weights: Dict[str, Decimal],
    denominator: Decimal,
) -> List[int]:
    """
    Round every weighted share but the last; the last takes the remainder.
    A rounded share never exceeds what is still unallocated, so no amount
    goes negative.
    """
    out = []
    allocated = 0
    entries = list(weights.values())
    for i, w in enumerate(entries):
        if i == len(entries) - 1:
            amount = total_amount - allocated
        else:
            amount = min(
                _round_half_up(Decimal(total_amount) * w / denominator),
                total_amount - allocated,
            )
        allocated += amount
        out.append(amount)
    return out


def calculate_percentage(
    total_amount: int,
    percentages: Dict[str, float],
    display_names: Optional[Dict[str, str]] = None,
) -> List[SplitAllocation]:
    """
    Split by percentage.
    Percentages that miss 100 only trigger an InexactInputWarning; the last
    participant absorbs the difference so the total stays exact.
    """
    _check_total(total_amount)
    percentages = PercentageSplit(percentages).percentages

    total_pct = sum(percentages.values())
    if abs(total_pct - 100.0) > PERCENTAGE_TOLERANCE:
        logger.warning("Percentages sum to %s%%, not 100%%", total_pct)
        warnings.warn(
            f"Percentages sum to {total_pct}%, not 100%; last participant takes the remainder",
            InexactInputWarning,
            stacklevel=2,
        )

    weights = {p: Decimal(str(v)) for p, v in percentages.items()}
    amounts = _weighted(total_amount, weights, Decimal(100))

    logger.debug("Percentage split: total=%d amounts=%s", total_amount, amounts)
    return [
        SplitAllocation(
            participant=p,
            amount=a,
            percentage=percentages[p],
            display_name=_name(display_names, p),
        )
        for p, a in zip(percentages, amounts)
    ]


def calculate_shares(
    total_amount: int,
    shares: Dict[str, int],
    display_names: Optional[Dict[str, str]] = None,
) -> List[SplitAllocation]:
    """Split by share counts, e.g. {A: 2, B: 1, C: 1} is 50/25/25"""
    _check_total(total_amount)
    shares = SharesSplit(shares).shares

    total_shares = sum(shares.values())
    weights = {p: Decimal(v) for p, v in shares.items()}
    amounts = _weighted(total_amount, weights, Decimal(total_shares))

    logger.debug(
        "Shares split: total=%d total_shares=%d amounts=%s",
        total_amount, total_shares, amounts,
    )
    return [
        SplitAllocation(
            participant=p,
            amount=a,
            shares=shares[p],
            display_name=_name(display_names, p),
        )
        for p, a in zip(shares, amounts)
    ]


def calculate_split(
    total_amount: int,
    strategy: SplitStrategy,
    display_names: Optional[Dict[str, str]] = None,
) -> List[SplitAllocation]:
    """Dispatch to the calculation for the given split strategy"""
    if not isinstance(strategy, (EqualSplit, ExactSplit, PercentageSplit, SharesSplit)):
        raise InvalidInputError(f"Unknown split strategy: {strategy!r}")
    logger.info(
        "Calculating %s split of %s among %d participants",
        strategy.split_type, total_amount, len(strategy.participants),
    )
    if isinstance(strategy, EqualSplit):
        return calculate_equal(total_amount, strategy.participants, display_names)
    if isinstance(strategy, ExactSplit):
        return calculate_exact(total_amount, strategy.amounts, display_names)
    if isinstance(strategy, PercentageSplit):
        return calculate_percentage(total_amount, strategy.percentages, display_names)
    return calculate_shares(total_amount, strategy.shares, display_names)


def validate_splits(total_amount: int, splits: List[SplitAllocation]) -> bool:
    """Check that split amounts add up to the total"""
    split_sum = sum(s.amount for s in splits)
    if split_sum != total_amount:
        logger.warning(
            "Split validation failed: split_sum=%d total=%d", split_sum, total_amount
        )
        return False
    return True
