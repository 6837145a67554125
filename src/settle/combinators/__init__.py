"""Combinators - compose many tasks into one Outcome."""

from .ops import all_, all_settled, any_, race
from .types import InvocationTrace, Tally

__all__ = [
    "all_",
    "race",
    "any_",
    "all_settled",
    "Tally",
    "InvocationTrace",
]
