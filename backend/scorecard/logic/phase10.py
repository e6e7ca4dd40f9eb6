"""
Phase 10 scoring.

Points are penalties for cards left in hand, so the lowest total is best.
A player who has completed all ten phases always ranks above everyone still
working through them, regardless of points.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorecard.logic.ranking import rank
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings
from scorecard.logic.types import Phase10Result, Phase10Round

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def _parse_rounds(rounds: Sequence[Phase10Round | Mapping[str, object]]) -> list[Phase10Round]:
    return [r if isinstance(r, Phase10Round) else Phase10Round.model_validate(r) for r in rounds]


def score_phase10(
    rounds: Sequence[Phase10Round | Mapping[str, object]],
    player_ids: Sequence[int],
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> Phase10Result:
    """
    Compute running totals, phase progress and standings for a Phase 10 game.

    Ranking: completers first, then ascending total within each group. The
    phase shown for a player starts at 1, advances once per completed phase
    and stays at the last phase once reached.
    """
    parsed = _parse_rounds(rounds)
    phase_count = settings.phase10_phase_count

    running_totals: dict[int, tuple[int, ...]] = {}
    final_scores: dict[int, int] = {}
    completed_counts: dict[int, int] = {}
    for player_id in player_ids:
        total = 0
        completed = 0
        totals: list[int] = []
        for round_ in parsed:
            entry = round_.entry(player_id)
            if entry is not None:
                total += entry.points or 0
                if entry.phase_completed:
                    completed += 1
            totals.append(total)
        running_totals[player_id] = tuple(totals)
        final_scores[player_id] = total
        completed_counts[player_id] = completed

    completers = tuple(player_id for player_id in player_ids if completed_counts[player_id] >= phase_count)

    def _standing_key(player_id: int) -> tuple[bool, int]:
        # False sorts first, so completers lead
        return (player_id not in completers, final_scores[player_id])

    sorted_ids = sorted(player_ids, key=_standing_key)
    positions = rank(sorted_ids, _standing_key)

    return Phase10Result(
        running_totals=running_totals,
        final_scores=final_scores,
        positions=positions,
        current_phases={player_id: min(1 + completed_counts[player_id], phase_count) for player_id in player_ids},
        completed_phase_counts=completed_counts,
        completers=completers,
        current_round=len(parsed),
    )
