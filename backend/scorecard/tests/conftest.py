from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from scorecard.logic.enums import GameStatus, GameType
from scorecard.logic.registry import GameTypeRegistry, default_game_types
from scorecard.logic.service import ScoringService
from scorecard.logic.types import GameRecord, PoolMatch

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

FIXED_NOW = datetime(2025, 3, 15, 20, 0, 0, tzinfo=UTC)


# ============================================================================
# Wire payload builders
# ============================================================================


def wizard_round(
    entries: Mapping[int, tuple[int | None, int | None]],
    *,
    werewolf: int | None = None,
    adjustment: int = 0,
) -> dict[str, Any]:
    """Build a flat wire Wizard round from `{player_id: (bid, won)}`."""
    data: dict[str, Any] = {str(player_id): {"bid": bid, "won": won} for player_id, (bid, won) in entries.items()}
    if werewolf is not None:
        data["_meta"] = {"werewolfPlayerId": werewolf, "werewolfAdjustment": adjustment}
    return data


def phase10_round(entries: Mapping[int, tuple[int, bool]]) -> dict[str, Any]:
    """Build a flat wire Phase 10 round from `{player_id: (points, phase_completed)}`."""
    return {str(player_id): {"points": points, "phaseCompleted": done} for player_id, (points, done) in entries.items()}


def pool_match(player1: int, player2: int, winner_id: int | None) -> PoolMatch:
    return PoolMatch(player1=player1, player2=player2, winner_id=winner_id)


def create_record(
    game_type: GameType = GameType.WIZARD,
    player_ids: Sequence[int] = (1, 2, 3),
    *,
    block_id: str = "block-1",
    status: GameStatus = GameStatus.IN_PROGRESS,
    rounds: Sequence[dict[str, Any]] = (),
    games: Sequence[PoolMatch] = (),
    scores: Mapping[int, Any] | None = None,
    final_scores: Mapping[int, int | float] | None = None,
    positions: Mapping[int, int] | None = None,
    winner_ids: Sequence[int] = (),
) -> GameRecord:
    """Create a GameRecord with sensible defaults for testing."""
    return GameRecord(
        block_id=block_id,
        game_type=game_type,
        player_ids=tuple(player_ids),
        status=status,
        rounds=tuple(rounds),
        games=tuple(games),
        scores=dict(scores or {}),
        final_scores=dict(final_scores or {}),
        positions=dict(positions or {}),
        winner_ids=tuple(winner_ids),
    )


def completed_record(
    game_type: GameType,
    positions: Mapping[int, int],
    *,
    block_id: str = "block-1",
    final_scores: Mapping[int, int | float] | None = None,
) -> GameRecord:
    """A completed record with stored positions, as the evening summary reads them."""
    return create_record(
        game_type,
        tuple(positions),
        block_id=block_id,
        status=GameStatus.COMPLETED,
        positions=positions,
        final_scores=final_scores or dict.fromkeys(positions, 0),
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def registry() -> GameTypeRegistry:
    return GameTypeRegistry(default_game_types())


@pytest.fixture
def service(registry) -> ScoringService:
    return ScoringService(registry)
