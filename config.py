"""
Configuration and ledger (de)serialization for What's My Share
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import MISSING, asdict, dataclass, fields
from typing import List, Optional

from errors import InvalidInputError
from models import (
    Expense,
    Group,
    SettlementRecord,
    SplitAllocation,
    is_money,
    strategy_from_dict,
)
from split_calculator import calculate_split
from utils import app_dir

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """User settings, read from settings.json in the app directory"""
    currency_symbol: str = "₹"
    decimal_places: int = 2
    confirmation_threshold: int = 500000  # ₹5000 in paisa
    log_level: str = "WARNING"


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from JSON file; missing file or keys fall back to defaults"""
    if path is None:
        path = os.path.join(app_dir(), "settings.json")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", path)
        return Settings()

    known = {f.name for f in fields(Settings)}
    unknown = set(data) - known
    if unknown:
        logger.warning("Ignoring unknown settings: %s", ", ".join(sorted(unknown)))
    return Settings(**{k: v for k, v in data.items() if k in known})


def configure_logging(level: str = "WARNING") -> None:
    """Set up root logging for command line use"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def load_people(path: str) -> List[str]:
    """Load people list from JSON file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return list(data.get("people", []))
    except FileNotFoundError:
        return []


def get_default_group() -> Group:
    """Create default group with the people from people.json"""
    people = load_people(os.path.join(app_dir(), "people.json"))
    return Group(name="My Group", members=people)


def group_to_dict(group: Group) -> dict:
    """Convert Group object to dictionary for JSON serialization"""
    return {
        "version": group.version,
        "name": group.name,
        "currency": group.currency,
        "members": list(group.members),
        "display_names": dict(group.display_names),
        "expenses": [asdict(e) for e in group.expenses],
        "settlements": [asdict(s) for s in group.settlements],
    }


def _check_fields(label: str, d: dict, cls, extra=()) -> None:
    """Reject ledger records with missing required or unknown keys"""
    known = {f.name for f in fields(cls)} | set(extra)
    required = {
        f.name for f in fields(cls)
        if f.default is MISSING and f.default_factory is MISSING
    } - {"splits", "description"}
    missing = required - set(d)
    if missing:
        raise InvalidInputError(
            f"{label} is missing {', '.join(sorted(missing))}"
        )
    unknown = set(d) - known
    if unknown:
        raise InvalidInputError(
            f"{label} has unknown fields: {', '.join(sorted(unknown))}"
        )
    if "amount" in d and not is_money(d["amount"]):
        raise InvalidInputError(
            f"{label} amount must be an int of minor units, got {d['amount']!r}"
        )


def _dict_to_expense(d: dict, group_names: dict) -> Expense:
    _check_fields(f"Expense {d.get('id')!r}", d, Expense, extra=("split",))
    d = dict(d)
    strategy = d.pop("split", None)
    splits = d.pop("splits", None)
    if splits is None:
        # ledger files may describe the split instead of listing it
        if strategy is None:
            raise InvalidInputError(f"Expense {d.get('id')!r} has neither splits nor a split strategy")
        strategy = strategy_from_dict(strategy)
        allocations = calculate_split(d["amount"], strategy, group_names)
        d.setdefault("split_type", strategy.split_type)
    else:
        for s in splits:
            _check_fields(f"Split of expense {d['id']!r}", s, SplitAllocation)
        allocations = [SplitAllocation(**s) for s in splits]
    d.setdefault("description", "")
    return Expense(splits=allocations, **d)


def _dict_to_settlement(d: dict) -> SettlementRecord:
    _check_fields(f"Settlement {d.get('id')!r}", d, SettlementRecord)
    return SettlementRecord(**d)


def dict_to_group(d: dict) -> Group:
    """Convert dictionary from JSON to Group object"""
    names = dict(d.get("display_names", {}))
    return Group(
        version=d.get("version", 1),
        name=d.get("name", "My Group"),
        currency=d.get("currency", "INR"),
        members=list(d.get("members", [])),
        display_names=names,
        expenses=[_dict_to_expense(e, names) for e in d.get("expenses", [])],
        settlements=[_dict_to_settlement(s) for s in d.get("settlements", [])],
    )


def load_group(path: str) -> Group:
    """Read a group ledger JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        return dict_to_group(json.load(f))
