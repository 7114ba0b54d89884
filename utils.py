"""
Utility functions for What's My Share
"""
from __future__ import annotations
import os
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from errors import InvalidInputError

CURRENCY_SYMBOL = "₹"
DECIMAL_PLACES = 2


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def format_amount(
    minor: int,
    symbol: str = CURRENCY_SYMBOL,
    decimals: int = DECIMAL_PLACES,
) -> str:
    """Format minor units for display, e.g. 123450 -> ₹1,234.50"""
    major = Decimal(abs(minor)).scaleb(-decimals)
    text = f"{symbol}{major:,.{decimals}f}"
    return f"-{text}" if minor < 0 else text


def format_with_sign(
    minor: int,
    symbol: str = CURRENCY_SYMBOL,
    decimals: int = DECIMAL_PLACES,
) -> str:
    """Positive = you're owed (+), negative = you owe (-)"""
    text = format_amount(abs(minor), symbol, decimals)
    if minor > 0:
        return f"+{text}"
    if minor < 0:
        return f"-{text}"
    return text


def parse_amount(text: str, decimals: int = DECIMAL_PLACES) -> int:
    """
    Parse a display string into minor units, e.g. "₹1,000.50" -> 100050.
    A leading minus sign is honoured; other symbols and separators are dropped.
    """
    s = str(text).strip()
    negative = s.startswith("-")
    clean = re.sub(r"[^\d.]", "", s)
    try:
        value = Decimal(clean)
    except InvalidOperation:
        raise InvalidInputError(f"Not a valid amount: {text!r}") from None
    minor = int(value.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return -minor if negative else minor


def app_dir() -> str:
    """
    Get application data directory (~/.whats_my_share, or $WHATS_MY_SHARE_HOME).
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("WHATS_MY_SHARE_HOME") or os.path.expanduser("~/.whats_my_share")
    os.makedirs(path, exist_ok=True)
    return path
