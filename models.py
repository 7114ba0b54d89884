"""
Data models for What's My Share

All money is an int count of minor currency units (paisa for INR).
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from errors import InvalidInputError


def is_money(value) -> bool:
    """True for a plain int (bools are rejected)"""
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SplitAllocation:
    """One participant's share of an expense"""
    participant: str
    amount: int
    percentage: Optional[float] = None
    shares: Optional[int] = None
    display_name: Optional[str] = None
    is_paid: bool = False


@dataclass
class EqualSplit:
    """Everyone pays the same; remainder units go to the first participants"""
    participants: List[str]
    split_type = "equal"

    def __post_init__(self):
        self.participants = list(self.participants)
        if not self.participants:
            raise InvalidInputError("Equal split needs at least one participant")
        if len(set(self.participants)) != len(self.participants):
            raise InvalidInputError("Equal split participants must be distinct")


@dataclass
class ExactSplit:
    """Caller supplies each participant's amount directly"""
    amounts: Dict[str, int]
    split_type = "exact"

    def __post_init__(self):
        self.amounts = dict(self.amounts)
        if not self.amounts:
            raise InvalidInputError("Exact split needs at least one participant")
        for p, v in self.amounts.items():
            if not is_money(v) or v < 0:
                raise InvalidInputError(f"Exact amount for {p} must be a non-negative int")

    @property
    def participants(self) -> List[str]:
        return list(self.amounts)


@dataclass
class PercentageSplit:
    """Share by percentage (0-100); percentages are advisory, the total wins"""
    percentages: Dict[str, float]
    split_type = "percentage"

    def __post_init__(self):
        self.percentages = {p: float(v) for p, v in self.percentages.items()}
        if not self.percentages:
            raise InvalidInputError("Percentage split needs at least one participant")
        for p, v in self.percentages.items():
            if v < 0:
                raise InvalidInputError(f"Percentage for {p} cannot be negative")

    @property
    def participants(self) -> List[str]:
        return list(self.percentages)


@dataclass
class SharesSplit:
    """Share by ratio, e.g. {A: 2, B: 1} means A pays two thirds"""
    shares: Dict[str, int]
    split_type = "shares"

    def __post_init__(self):
        self.shares = dict(self.shares)
        if not self.shares:
            raise InvalidInputError("Shares split needs at least one participant")
        for p, v in self.shares.items():
            if not is_money(v) or v < 0:
                raise InvalidInputError(f"Share count for {p} must be a non-negative int")
        if sum(self.shares.values()) == 0:
            raise InvalidInputError("Total shares cannot be zero")

    @property
    def participants(self) -> List[str]:
        return list(self.shares)


SplitStrategy = Union[EqualSplit, ExactSplit, PercentageSplit, SharesSplit]


def strategy_from_dict(d: dict) -> SplitStrategy:
    """Build a split strategy from its dict form"""
    kind = d.get("type")
    if kind == "equal":
        return EqualSplit(d.get("participants", []))
    if kind == "exact":
        return ExactSplit(d.get("amounts", {}))
    if kind == "percentage":
        return PercentageSplit(d.get("percentages", {}))
    if kind == "shares":
        return SharesSplit(d.get("shares", {}))
    raise InvalidInputError(f"Unknown split type: {kind!r}")


@dataclass(frozen=True)
class Transfer:
    """Settlement instruction: debtor pays creditor amount"""
    debtor: str
    creditor: str
    amount: int


@dataclass(frozen=True)
class SimplificationResult:
    """Transfers plus whatever could not be settled (non-zero-sum input)"""
    transfers: Tuple[Transfer, ...]
    residual: Dict[str, int] = field(default_factory=dict)

    @property
    def is_balanced(self) -> bool:
        return not self.residual


@dataclass(frozen=True)
class ExplanationStep:
    """One narrated step of a debt simplification"""
    title: str
    description: str
    balances: Dict[str, int]
    transfer: Optional[Transfer] = None


@dataclass
class Expense:
    """Single shared expense"""
    id: str
    date: str  # YYYY-MM-DD
    description: str
    amount: int
    paid_by: Dict[str, int]  # payer -> amount paid
    splits: List[SplitAllocation]
    split_type: str = "equal"
    notes: str = ""


@dataclass
class SettlementRecord:
    """Payment made (or proposed) between two members"""
    id: str
    date: str
    debtor: str
    creditor: str
    amount: int
    status: str = "pending"  # only "confirmed" records move balances


@dataclass
class Group:
    """A group of people sharing expenses"""
    name: str
    members: List[str]
    display_names: Dict[str, str] = field(default_factory=dict)
    currency: str = "INR"
    expenses: List[Expense] = field(default_factory=list)
    settlements: List[SettlementRecord] = field(default_factory=list)
    version: int = 1

    def display_name(self, participant: str) -> str:
        return self.display_names.get(participant, participant)
