"""
Deterministic draws keyed by workload identity.

The same key always maps to the same draw, so a given flow keeps landing
in the same rampup bucket for as long as the plan is unchanged instead of
flapping between versions on every run.
"""
from typing import Union

import mmh3

from imagemgmt.services.weighted_selector import MAX_DRAW

INT32_MIN = -(2 ** 31)


def murmur_hash32(key: bytes) -> int:
    """Signed 32-bit MurmurHash3 (x86 variant, seed 0) of the key."""
    return mmh3.hash(key, 0, signed=True)


def derive_draw(key: Union[bytes, str]) -> int:
    """
    Map a key to an integer in [1, 100].

    Args:
        key: Raw bytes, or a string which is UTF-8 encoded

    Returns:
        abs(murmur3_x86_32(key)) % 100 + 1
    """
    if isinstance(key, str):
        key = key.encode("utf-8")
    hashed = murmur_hash32(key)
    # abs(INT32_MIN) does not fit in 32 bits
    magnitude = 0 if hashed == INT32_MIN else abs(hashed)
    return magnitude % MAX_DRAW + 1
