"""
Darts scoring: winner determination and finish order.

Darts has no incremental rounds; each player's remaining score (and the round
in which they checked out, if they did) is entered once at game end.

Winner determination:
1. Players with a remaining score of 0 (finished) win.
2. Among finished players with a recorded round, the lowest round wins;
   equal rounds are a draw.
3. If no finished player has a round recorded, all finished players draw.
4. If nobody finished, the lowest remaining score wins (ties allowed).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from scorecard.logic.ranking import rank
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS
from scorecard.logic.types import DartsResult, DartsScoreEntry

if TYPE_CHECKING:
    from collections.abc import Mapping

_FINISHED = 0
_UNFINISHED = 1


def is_valid_score(score: object, max_score: int = DEFAULT_SCORING_SETTINGS.darts_starting_score) -> bool:
    """Check a remaining score is an integer between 0 and the starting score."""
    if isinstance(score, bool) or not isinstance(score, int):
        return False
    return 0 <= score <= max_score


def determine_winners(scores: Mapping[int, DartsScoreEntry]) -> tuple[int, ...]:
    """Return the winner ids; more than one id means a draw."""
    if not scores:
        return ()

    finished = [player_id for player_id, entry in scores.items() if entry.is_finished]
    if finished:
        with_rounds = [player_id for player_id in finished if scores[player_id].finished_round is not None]
        if not with_rounds:
            return tuple(finished)
        lowest_round = min(scores[player_id].finished_round for player_id in with_rounds)  # type: ignore[type-var]
        return tuple(player_id for player_id in with_rounds if scores[player_id].finished_round == lowest_round)

    lowest_score = min(entry.final_score for entry in scores.values())
    return tuple(player_id for player_id, entry in scores.items() if entry.final_score == lowest_score)


def _finish_key(entry: DartsScoreEntry) -> tuple[int, float, int]:
    """(finished bucket, checkout round or inf, remaining score); lower is better."""
    if entry.is_finished:
        finished_round = math.inf if entry.finished_round is None else entry.finished_round
        return (_FINISHED, finished_round, 0)
    return (_UNFINISHED, math.inf, entry.final_score)


def rank_darts(scores: Mapping[int, DartsScoreEntry]) -> tuple[list[int], dict[int, int]]:
    """
    Sort players by finish order and assign positions.

    Finished players come first by checkout round (unknown round last), then
    unfinished players by ascending remaining score. Input order breaks
    exact ties in the display order; tied players share a position.
    """
    sorted_ids = sorted(scores, key=lambda player_id: _finish_key(scores[player_id]))
    positions = rank(sorted_ids, lambda player_id: _finish_key(scores[player_id]))
    return sorted_ids, positions


def score_darts(scores: Mapping[int, DartsScoreEntry | Mapping[str, object]]) -> DartsResult:
    """Compute winners, positions and final (remaining) scores for a darts game."""
    entries = {
        int(player_id): entry if isinstance(entry, DartsScoreEntry) else DartsScoreEntry.model_validate(entry)
        for player_id, entry in scores.items()
    }
    _, positions = rank_darts(entries)
    return DartsResult(
        winner_ids=determine_winners(entries),
        positions=positions,
        final_scores={player_id: entry.final_score for player_id, entry in entries.items()},
    )
