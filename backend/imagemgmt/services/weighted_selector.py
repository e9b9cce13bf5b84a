"""
Weighted version selection over percentage ranges.

Entries are sorted ascending by percentage (stable, so equal percentages
keep plan order) and each one owns the inclusive range
[prev + 1, prev + percentage], where prev is the running total of the
entries before it. For versions 1.1.1, 1.1.2 and 1.1.3 at 10, 30 and 60
percent the ranges are [1-10], [11-40] and [41-100]: a draw of 22 selects
1.1.2 and a draw of 60 selects 1.1.3.
"""
import random
from typing import Iterable, List, Optional, Tuple

from imagemgmt.schemas.rampup import RampupEntry

MIN_DRAW = 1
MAX_DRAW = 100


def sort_entries(entries: Iterable[RampupEntry]) -> List[RampupEntry]:
    """Return entries sorted ascending by rampup percentage (stable)."""
    return sorted(entries, key=lambda entry: entry.rampup_percentage)


def percentage_ranges(entries: Iterable[RampupEntry]) -> List[Tuple[RampupEntry, int, int]]:
    """
    Compute the draw range owned by each entry.

    Returns:
        List of (entry, low, high) in selection order. A zero-percentage
        entry has high == low - 1, i.e. an empty range.
    """
    ranges = []
    prev = 0
    for entry in sort_entries(entries):
        ranges.append((entry, prev + 1, prev + entry.rampup_percentage))
        prev += entry.rampup_percentage
    return ranges


def select_version(entries: Iterable[RampupEntry], draw: int) -> Optional[RampupEntry]:
    """
    Select the entry whose range contains the draw.

    Args:
        entries: Rampup entries of one plan
        draw: Integer in [1, 100]

    Returns:
        The matching entry, or None when no range contains the draw (only
        possible if the plan does not sum to 100)

    Raises:
        ValueError: If draw is outside [1, 100]
    """
    if not MIN_DRAW <= draw <= MAX_DRAW:
        raise ValueError(f"Draw must be in [{MIN_DRAW}, {MAX_DRAW}], got {draw}")

    for entry, low, high in percentage_ranges(entries):
        if low <= draw <= high:
            return entry
    return None


def random_draw(rng: Optional[random.Random] = None) -> int:
    """
    Draw a uniform integer in [1, 100].

    A fresh generator is created when none is given so concurrent callers
    never share generator state.
    """
    rng = rng or random.Random()
    return rng.randint(MIN_DRAW, MAX_DRAW)
