"""
Scoring service: the single entry point every call site scores through.

Dispatches a record to its game type's strategy and applies the freeze rule:
once a game is completed, its stored final scores, positions and winners are
returned as they were saved and never recomputed from the rounds.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorecard.logic.evening_summary import collect_roster, score_evening_summary
from scorecard.logic.ranking import winners
from scorecard.logic.registry import DEFAULT_REGISTRY, GameTypeRegistry
from scorecard.logic.rng import tie_break_order
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings, validate_settings
from scorecard.logic.types import DartsResult, PoolResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorecard.logic.types import EveningSummary, GameRecord, GameScores

logger = structlog.get_logger()


def _stored_winners(record: GameRecord) -> tuple[int, ...]:
    if record.winner_ids:
        return record.winner_ids
    if record.winner_id is not None:
        return (record.winner_id,)
    return winners(record.positions)


def _freeze(scores: GameScores, record: GameRecord) -> GameScores:
    """Overlay the stored results of a completed record on freshly computed scores and details."""
    if not record.final_scores and not record.positions:
        # completed before results were stored; nothing to freeze
        return scores
    final_scores = dict(record.final_scores) or scores.final_scores
    positions = dict(record.positions) or scores.positions
    winner_ids = _stored_winners(record) if record.positions else scores.winner_ids

    details = scores.details
    # pool details are already frozen per player by score_pool
    if details is not None and not isinstance(details, PoolResult):
        overlay: dict[str, object] = {"final_scores": final_scores, "positions": positions}
        if isinstance(details, DartsResult):
            overlay["winner_ids"] = winner_ids
        details = details.model_copy(update=overlay)

    return scores.model_copy(
        update={
            "final_scores": final_scores,
            "positions": positions,
            "winner_ids": winner_ids,
            "details": details,
            "is_frozen": True,
        },
    )


class ScoringService:
    """Binds a registry, scoring settings and an optional tie-break seed."""

    def __init__(
        self,
        registry: GameTypeRegistry = DEFAULT_REGISTRY,
        settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
        tie_break_seed: str | None = None,
    ) -> None:
        validate_settings(settings)
        self._registry = registry
        self._settings = settings
        self._tie_break_seed = tie_break_seed

    @property
    def registry(self) -> GameTypeRegistry:
        return self._registry

    @property
    def settings(self) -> ScoringSettings:
        return self._settings

    def _seed(self, *scopes: str | None) -> str | None:
        parts = [part for part in (self._tie_break_seed, *scopes) if part]
        return ":".join(parts) or None

    def calculate_scores(self, record: GameRecord) -> GameScores:
        config = self._registry.get(record.game_type)
        tie_break = tie_break_order(record.player_ids, self._seed(record.block_id))
        scores = config.scorer(record, self._settings, tie_break)
        if record.is_completed:
            scores = _freeze(scores, record)
        logger.debug(
            "scores calculated",
            block_id=record.block_id,
            game_type=record.game_type,
            is_frozen=scores.is_frozen,
        )
        return scores

    def evening_summary(
        self,
        records: Sequence[GameRecord],
        all_player_ids: Sequence[int] | None = None,
        *,
        container_id: str | None = None,
    ) -> EveningSummary:
        """Rank the sibling records of one container; ties use an order seeded by `container_id`."""
        roster = list(dict.fromkeys(all_player_ids)) if all_player_ids is not None else collect_roster(records)
        return score_evening_summary(
            records,
            roster,
            tie_break=tie_break_order(roster, self._seed(container_id)),
            label_of=self._registry.label_of,
        )


def calculate_scores(
    record: GameRecord,
    registry: GameTypeRegistry = DEFAULT_REGISTRY,
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
    tie_break_seed: str | None = None,
) -> GameScores:
    """Score one record with a throwaway service; see `ScoringService.calculate_scores`."""
    return ScoringService(registry, settings, tie_break_seed).calculate_scores(record)


def summarize_evening(
    records: Sequence[GameRecord],
    all_player_ids: Sequence[int] | None = None,
    *,
    container_id: str | None = None,
    registry: GameTypeRegistry = DEFAULT_REGISTRY,
) -> EveningSummary:
    return ScoringService(registry).evening_summary(records, all_player_ids, container_id=container_id)
