"""
Exceptions and warning categories for What's My Share
"""
from __future__ import annotations


class WhatsMyShareError(Exception):
    """Base class for all errors raised by the split and settlement code"""


class InvalidInputError(WhatsMyShareError, ValueError):
    """Input that cannot produce a meaningful split or settlement"""


class ExactSplitMismatchError(InvalidInputError):
    """Exact split amounts that do not add up to the expense total"""

    def __init__(self, allocated: int, expected: int):
        super().__init__(
            f"Exact amounts sum ({allocated}) does not match total ({expected})"
        )
        self.allocated = allocated
        self.expected = expected


class InexactInputWarning(UserWarning):
    """Weights that do not add up; the monetary total still wins"""


class NonZeroSumBalanceWarning(UserWarning):
    """Balances handed to the simplifier that do not net to zero"""
