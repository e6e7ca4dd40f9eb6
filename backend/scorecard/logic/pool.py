"""
Pool billiard round-robin standings.

Every match awards the winner 3 points and the loser 1 point (1 for playing
plus 2 for winning). Standings are ordered by points, then win percentage,
then the head-to-head record of the two compared players, then a stable
tie-break order fixed before sorting.

Positions only look at (points, win percentage): two players separated by
head-to-head are listed in that order but still share a position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import TYPE_CHECKING

import structlog

from scorecard.logic.ranking import rank
from scorecard.logic.rng import tie_break_index, tie_break_order
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings
from scorecard.logic.types import HeadToHead, PoolMatch, PoolResult, StandingsRow

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = structlog.get_logger()


@dataclass
class _Tally:
    """Mutable accumulator used while walking the match log."""

    player_id: int
    wins: int = 0
    losses: int = 0
    points: int | float = 0
    head_to_head: dict[int, list[int]] = field(default_factory=dict)  # opponent -> [wins, losses]

    @property
    def win_pct(self) -> float:
        played = self.wins + self.losses
        return self.wins / played if played else 0.0

    def record(self, opponent_id: int, *, won: bool, points: int) -> None:
        record = self.head_to_head.setdefault(opponent_id, [0, 0])
        if won:
            self.wins += 1
            record[0] += 1
        else:
            self.losses += 1
            record[1] += 1
        self.points += points

    def differential_against(self, opponent_id: int) -> int:
        wins, losses = self.head_to_head.get(opponent_id, (0, 0))
        return wins - losses


def _parse_matches(matches: Sequence[PoolMatch | Mapping[str, object]]) -> list[PoolMatch]:
    return [m if isinstance(m, PoolMatch) else PoolMatch.model_validate(m) for m in matches]


def tally_matches(
    matches: Sequence[PoolMatch | Mapping[str, object]],
    player_ids: Sequence[int],
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> dict[int, _Tally]:
    """Aggregate wins, losses, points and head-to-head records per roster player."""
    tallies = {player_id: _Tally(player_id=player_id) for player_id in player_ids}

    for index, match in enumerate(_parse_matches(matches)):
        if not match.is_complete:
            logger.debug("skipping incomplete pool match", match_index=index)
            continue
        winner_id = match.winner_id
        loser_id = match.loser_id
        if winner_id in tallies:
            tallies[winner_id].record(loser_id, won=True, points=settings.pool_win_points)  # type: ignore[arg-type]
        if loser_id in tallies:
            tallies[loser_id].record(winner_id, won=False, points=settings.pool_loss_points)  # type: ignore[arg-type]
        if winner_id not in tallies or loser_id not in tallies:
            logger.debug(
                "pool match references a player outside the roster",
                match_index=index,
                winner_id=winner_id,
                loser_id=loser_id,
            )

    return tallies


def _sort_standings(tallies: Mapping[int, _Tally], order_index: Mapping[int, int]) -> list[int]:
    fallback = len(order_index)

    def _compare(a_id: int, b_id: int) -> int:
        a, b = tallies[a_id], tallies[b_id]
        if a.points != b.points:
            return -1 if a.points > b.points else 1
        if a.win_pct != b.win_pct:
            return -1 if a.win_pct > b.win_pct else 1
        diff = a.differential_against(b_id)
        if diff:
            return -1 if diff > 0 else 1
        return order_index.get(a_id, fallback) - order_index.get(b_id, fallback)

    return sorted(tallies, key=cmp_to_key(_compare))


def score_pool(
    matches: Sequence[PoolMatch | Mapping[str, object]],
    player_ids: Sequence[int],
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
    tie_break: Sequence[int] | None = None,
    *,
    frozen_scores: Mapping[int, int | float] | None = None,
    frozen_positions: Mapping[int, int] | None = None,
) -> PoolResult:
    """
    Compute round-robin standings for a pool session.

    `tie_break` is the final ordering for players that are tied on every
    other criterion; it defaults to ascending player id.

    For a completed session pass the stored `frozen_scores` and
    `frozen_positions`: points and positions are then taken verbatim from
    them (per player, falling back to the computed value when a player is
    missing), so later formula changes never rewrite history. Wins, losses
    and head-to-head are still derived from the match log for display.
    A completed session saved without any final scores passes nothing here
    and its points come from the match log like an open session.
    """
    tallies = tally_matches(matches, player_ids, settings)
    is_frozen = bool(frozen_scores) or bool(frozen_positions)

    if frozen_scores:
        for player_id, tally in tallies.items():
            tally.points = frozen_scores.get(player_id, tally.points)

    order_index = tie_break_index(tie_break if tie_break is not None else tie_break_order(player_ids))
    sorted_ids = _sort_standings(tallies, order_index)

    digits = settings.win_pct_digits

    def _tie_key(player_id: int) -> tuple[int | float, float]:
        tally = tallies[player_id]
        return (tally.points, round(tally.win_pct, digits))

    positions = rank(sorted_ids, _tie_key)

    if frozen_positions:
        positions = {player_id: frozen_positions.get(player_id, positions[player_id]) for player_id in sorted_ids}
        sort_index = {player_id: index for index, player_id in enumerate(sorted_ids)}
        sorted_ids = sorted(sorted_ids, key=lambda player_id: (positions[player_id], sort_index[player_id]))
        positions = {player_id: positions[player_id] for player_id in sorted_ids}

    standings = tuple(
        StandingsRow(
            player_id=player_id,
            score=tallies[player_id].points,
            position=positions[player_id],
            wins=tallies[player_id].wins,
            losses=tallies[player_id].losses,
            win_pct=round(tallies[player_id].win_pct, digits),
            head_to_head={
                opponent_id: HeadToHead(wins=wins, losses=losses)
                for opponent_id, (wins, losses) in tallies[player_id].head_to_head.items()
            },
        )
        for player_id in sorted_ids
    )

    return PoolResult(
        standings=standings,
        positions=positions,
        final_scores={player_id: tallies[player_id].points for player_id in sorted_ids},
        is_frozen=is_frozen,
    )
