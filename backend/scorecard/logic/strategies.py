"""
Per-game-type scoring strategies.

Each strategy takes a game record and returns the uniform `GameScores`
shape. They always compute from the record's raw data; the freeze rule for
completed records is applied by the scoring service on top of them, except
for pool where the stored values also reorder the standings rows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scorecard.logic.darts import score_darts
from scorecard.logic.phase10 import score_phase10
from scorecard.logic.pool import score_pool
from scorecard.logic.ranking import winners
from scorecard.logic.types import GameScores
from scorecard.logic.wizard import score_wizard

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scorecard.logic.settings import ScoringSettings
    from scorecard.logic.types import GameRecord

    Scorer = Callable[[GameRecord, ScoringSettings, Sequence[int] | None], GameScores]


def darts_strategy(
    record: GameRecord,
    settings: ScoringSettings,
    tie_break: Sequence[int] | None = None,  # noqa: ARG001
) -> GameScores:
    result = score_darts(record.scores)
    return GameScores(
        game_type=record.game_type,
        final_scores=result.final_scores,
        positions=result.positions,
        winner_ids=result.winner_ids,
        details=result,
    )


def wizard_strategy(
    record: GameRecord,
    settings: ScoringSettings,
    tie_break: Sequence[int] | None = None,  # noqa: ARG001
) -> GameScores:
    result = score_wizard(record.rounds, record.player_ids, settings)
    return GameScores(
        game_type=record.game_type,
        final_scores=result.final_scores,
        positions=result.positions,
        winner_ids=winners(result.positions) if record.rounds else (),
        details=result,
    )


def phase10_strategy(
    record: GameRecord,
    settings: ScoringSettings,
    tie_break: Sequence[int] | None = None,  # noqa: ARG001
) -> GameScores:
    result = score_phase10(record.rounds, record.player_ids, settings)
    return GameScores(
        game_type=record.game_type,
        final_scores=result.final_scores,
        positions=result.positions,
        winner_ids=winners(result.positions) if record.rounds else (),
        details=result,
    )


def pool_strategy(
    record: GameRecord,
    settings: ScoringSettings,
    tie_break: Sequence[int] | None = None,
) -> GameScores:
    """Pool standings; completed sessions are re-sorted by their stored results."""
    frozen = record.is_completed
    result = score_pool(
        record.games,
        record.player_ids,
        settings,
        tie_break,
        frozen_scores=record.final_scores if frozen else None,
        frozen_positions=record.positions if frozen else None,
    )
    return GameScores(
        game_type=record.game_type,
        final_scores=result.final_scores,
        positions=result.positions,
        winner_ids=winners(result.positions) if record.games else (),
        is_frozen=result.is_frozen,
        details=result,
    )
