"""
Final tie-break order for standings that are fully tied.

Shuffling inside a sort comparator is not a valid total order, so the
"show genuine ties in random order" behaviour is expressed as one permutation
computed before sorting and then used as the last sort key.

The permutation is derived from a seed string via SHA512 with a versioned
domain prefix, so the same seed (for example the container id of an evening)
always yields the same order.
"""

from __future__ import annotations

import hashlib
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

TIE_BREAK_VERSION = "sha512-shuffle-v1"
_DOMAIN_PREFIX = b"scorecard-tiebreak-v1:"


def _derive_rng(seed: str) -> random.Random:
    """Derive a dedicated Random instance from a domain-separated hash of the seed."""
    derived = hashlib.sha512(_DOMAIN_PREFIX + seed.encode()).digest()
    return random.Random(int.from_bytes(derived, byteorder="little"))  # noqa: S311 - ordering only


def tie_break_order(player_ids: Iterable[int], seed: str | None = None) -> tuple[int, ...]:
    """
    Return the final tie-break order for a set of players.

    Without a seed the order is ascending player id. With a seed the ids are
    sorted first (so the result does not depend on input order) and then
    shuffled once with the derived generator.
    """
    ordered = sorted(set(player_ids))
    if seed is None:
        return tuple(ordered)
    _derive_rng(seed).shuffle(ordered)
    return tuple(ordered)


def tie_break_index(order: Iterable[int]) -> dict[int, int]:
    """Map player id to its index in a tie-break order, for use as a sort key."""
    return {player_id: index for index, player_id in enumerate(order)}
