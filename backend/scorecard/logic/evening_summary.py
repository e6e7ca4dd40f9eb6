"""
Evening summary: one ranking across all completed games of a container.

Each completed game converts its stored positions into points: with N
participants the winner gets N, second N-1, ..., last 1. Points are summed per
player. Ties on total are broken golden-score style: most 1st places, then
most 2nd places, and so on; players still level after that are ordered by the
tie-break order fixed before sorting.

Only stored positions are used, never the sub-game's rounds, so the summary
inherits the freeze of each completed game.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorecard.logic.ranking import rank
from scorecard.logic.rng import tie_break_index, tie_break_order
from scorecard.logic.types import EveningSummary, EveningSummaryRow

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scorecard.logic.enums import GameType
    from scorecard.logic.types import GameRecord


def _default_label(game_type: GameType) -> str:
    return game_type.value.capitalize()


def position_points(position: int, num_players: int) -> int:
    """Points for finishing at `position` among `num_players` (never negative)."""
    return max(0, num_players - position + 1)


def collect_roster(games: Sequence[GameRecord]) -> list[int]:
    """Union of all sibling rosters (completed or not), in first-seen order."""
    roster: list[int] = []
    seen: set[int] = set()
    for game in games:
        for player_id in game.player_ids:
            if player_id not in seen:
                seen.add(player_id)
                roster.append(player_id)
    return roster


def score_evening_summary(
    games: Sequence[GameRecord],
    all_player_ids: Sequence[int] | None = None,
    *,
    tie_break: Sequence[int] | None = None,
    label_of: Callable[[GameType], str] = _default_label,
) -> EveningSummary:
    """
    Aggregate the sibling games of one container into an overall ranking.

    `games` may contain records in any status; only completed ones with
    stored positions are scored, in the given order. Players who only appear
    in unfinished games are listed with zero points. When no game is complete
    every player shares position 1, listed in tie-break order.
    """
    # a repeated id would score the same player twice per game
    roster = list(dict.fromkeys(all_player_ids)) if all_player_ids is not None else collect_roster(games)
    if not roster:
        return EveningSummary()

    order_index = tie_break_index(tie_break if tie_break is not None else tie_break_order(roster))
    fallback = len(order_index)
    completed = [game for game in games if game.has_results]

    if not completed:
        display_order = sorted(roster, key=lambda player_id: order_index.get(player_id, fallback))
        return EveningSummary(
            rows=tuple(
                EveningSummaryRow(player_id=player_id, total_points=0, overall_position=1)
                for player_id in display_order
            ),
        )

    per_game_position: dict[int, list[int | None]] = {player_id: [] for player_id in roster}
    per_game_points: dict[int, list[int | None]] = {player_id: [] for player_id in roster}
    labels: list[str] = []

    for game_number, game in enumerate(completed, start=1):
        labels.append(f"{label_of(game.game_type)} {game_number}")
        num_players = len(game.player_ids)
        participants = set(game.player_ids)
        for player_id in roster:
            if player_id in participants:
                # a participant without a stored position counts as last
                position = game.positions.get(player_id, num_players)
                per_game_position[player_id].append(position)
                per_game_points[player_id].append(position_points(position, num_players))
            else:
                per_game_position[player_id].append(None)
                per_game_points[player_id].append(None)

    totals = {player_id: sum(p for p in per_game_points[player_id] if p is not None) for player_id in roster}
    max_position = max(
        (p for positions in per_game_position.values() for p in positions if p is not None),
        default=0,
    )
    finish_counts = {
        player_id: tuple(per_game_position[player_id].count(place) for place in range(1, max_position + 1))
        for player_id in roster
    }

    def _sort_key(player_id: int) -> tuple[int, tuple[int, ...], int]:
        return (
            -totals[player_id],
            tuple(-count for count in finish_counts[player_id]),
            order_index.get(player_id, fallback),
        )

    sorted_ids = sorted(roster, key=_sort_key)
    positions = rank(sorted_ids, lambda player_id: (totals[player_id], finish_counts[player_id]))

    return EveningSummary(
        rows=tuple(
            EveningSummaryRow(
                player_id=player_id,
                total_points=totals[player_id],
                per_game_position=tuple(per_game_position[player_id]),
                per_game_points=tuple(per_game_points[player_id]),
                overall_position=positions[player_id],
            )
            for player_id in sorted_ids
        ),
        game_labels=tuple(labels),
        has_results=True,
    )
