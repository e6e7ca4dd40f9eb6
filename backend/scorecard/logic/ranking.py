"""
Competition ranking over pre-sorted standings.

Every scorer sorts its players best-first with a total order and then hands
the sorted ids to `rank` together with the key that defines a tie. Equal keys
share a position and the next distinct key jumps to its 1-based index
(1, 2, 2, 4).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Mapping, Sequence

_NO_KEY = object()


def rank(sorted_ids: Sequence[int], key_of: Callable[[int], Hashable]) -> dict[int, int]:
    """
    Assign competition-ranking positions to an already sorted sequence.

    Only adjacent keys are compared, so the caller's sort decides the order
    between entries and `key_of` only decides which neighbours tie.
    """
    positions: dict[int, int] = {}
    current_position = 1
    previous_key: object = _NO_KEY

    for index, player_id in enumerate(sorted_ids):
        key = key_of(player_id)
        if key != previous_key:
            current_position = index + 1
            previous_key = key
        positions[player_id] = current_position

    return positions


def winners(positions: Mapping[int, int]) -> tuple[int, ...]:
    """Return the ids sharing first place, in mapping order."""
    return tuple(player_id for player_id, position in positions.items() if position == 1)


def order_by_position(positions: Mapping[int, int], player_ids: Sequence[int]) -> list[int]:
    """Sort player ids by stored position; unknown players go last, roster order breaks ties."""
    roster_index = {player_id: index for index, player_id in enumerate(player_ids)}
    missing = len(player_ids) + 1

    def _key(player_id: int) -> tuple[int, int]:
        return (positions.get(player_id, missing), roster_index.get(player_id, missing))

    return sorted(player_ids, key=_key)
