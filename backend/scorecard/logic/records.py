"""
Game record lifecycle transitions.

Every function takes a record and returns a new one (records are frozen), so
the storage collaborator decides when a transition is persisted. Transitions
that would rewrite a finished game raise GameRecordStateError; completing a
game freezes its computed results into the record.

Timestamps come from the `now` argument so callers (and tests) control the
clock.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from scorecard.logic.enums import GameStatus, GameType
from scorecard.logic.exceptions import GameRecordStateError, RoundIndexError
from scorecard.logic.registry import DEFAULT_REGISTRY
from scorecard.logic.service import ScoringService
from scorecard.logic.types import DartsScoreEntry, GameRecord, Phase10Round, PoolMatch, WizardRound

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scorecard.logic.registry import GameTypeRegistry

logger = structlog.get_logger()

_ROUND_MODELS: dict[GameType, type[WizardRound] | type[Phase10Round]] = {
    GameType.WIZARD: WizardRound,
    GameType.PHASE10: Phase10Round,
}

_FINISHED_STATUSES = (GameStatus.COMPLETED, GameStatus.CANCELLED)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _require_open(record: GameRecord, action: str) -> None:
    if record.status in _FINISHED_STATUSES:
        raise GameRecordStateError(f"cannot {action}: game {record.block_id!r} is {record.status.value}")


def _require_type(record: GameRecord, action: str, *game_types: GameType) -> None:
    if record.game_type not in game_types:
        raise GameRecordStateError(f"cannot {action} on a {record.game_type.value} game")


def _started(record: GameRecord, now: datetime | None) -> dict[str, Any]:
    """Fields that move a pending record into progress on its first data entry."""
    if record.status != GameStatus.PENDING:
        return {}
    return {"status": GameStatus.IN_PROGRESS, "started_at": record.started_at or now or _utcnow()}


def _normalize_round(record: GameRecord, round_data: WizardRound | Phase10Round | Mapping[str, Any]) -> dict[str, Any]:
    model = _ROUND_MODELS[record.game_type]
    parsed = round_data if isinstance(round_data, model) else model.model_validate(dict(round_data))
    return parsed.to_wire()


def _check_index(items: Sequence[object], index: int, kind: str) -> None:
    if not 0 <= index < len(items):
        raise RoundIndexError(f"{kind} index {index} out of range (have {len(items)})")


def create_game(
    block_id: str,
    game_type: GameType | str,
    player_ids: Sequence[int],
    registry: GameTypeRegistry = DEFAULT_REGISTRY,
) -> GameRecord:
    """Create a pending record after checking the game type and roster size."""
    registry.validate_player_count(game_type, len(player_ids))
    record = GameRecord(block_id=block_id, game_type=GameType(game_type), player_ids=tuple(player_ids))
    logger.info("game created", block_id=block_id, game_type=record.game_type, player_count=len(player_ids))
    return record


def start_game(record: GameRecord, now: datetime | None = None) -> GameRecord:
    _require_open(record, "start")
    if record.status == GameStatus.IN_PROGRESS:
        return record
    logger.info("game started", block_id=record.block_id)
    return record.model_copy(update=_started(record, now))


def update_players(
    record: GameRecord,
    player_ids: Sequence[int],
    registry: GameTypeRegistry = DEFAULT_REGISTRY,
) -> GameRecord:
    """Replace the roster of an open game; round data of removed players stays but is ignored."""
    _require_open(record, "change players")
    registry.validate_player_count(record.game_type, len(player_ids))
    logger.info("players updated", block_id=record.block_id, player_ids=list(player_ids))
    return GameRecord.model_validate({**record.model_dump(), "player_ids": tuple(player_ids)})


def add_round(
    record: GameRecord,
    round_data: WizardRound | Phase10Round | Mapping[str, Any],
    now: datetime | None = None,
) -> GameRecord:
    _require_open(record, "add round")
    _require_type(record, "add round", *_ROUND_MODELS)
    rounds = (*record.rounds, _normalize_round(record, round_data))
    logger.info("round added", block_id=record.block_id, round_index=len(rounds) - 1)
    return record.model_copy(update={"rounds": rounds, **_started(record, now)})


def update_round(
    record: GameRecord,
    index: int,
    round_data: WizardRound | Phase10Round | Mapping[str, Any],
) -> GameRecord:
    """Replace one round, e.g. entering tricks won after the bids."""
    _require_open(record, "update round")
    _require_type(record, "update round", *_ROUND_MODELS)
    _check_index(record.rounds, index, "round")
    rounds = list(record.rounds)
    rounds[index] = _normalize_round(record, round_data)
    logger.info("round updated", block_id=record.block_id, round_index=index)
    return record.model_copy(update={"rounds": tuple(rounds)})


def delete_round(record: GameRecord, index: int) -> GameRecord:
    _require_open(record, "delete round")
    _require_type(record, "delete round", *_ROUND_MODELS)
    _check_index(record.rounds, index, "round")
    rounds = record.rounds[:index] + record.rounds[index + 1 :]
    logger.info("round deleted", block_id=record.block_id, round_index=index)
    return record.model_copy(update={"rounds": rounds})


def add_match(
    record: GameRecord,
    match: PoolMatch | Mapping[str, Any],
    now: datetime | None = None,
) -> GameRecord:
    _require_open(record, "add match")
    _require_type(record, "add match", GameType.POOL)
    parsed = match if isinstance(match, PoolMatch) else PoolMatch.model_validate(dict(match))
    games = (*record.games, parsed)
    logger.info("match added", block_id=record.block_id, match_index=len(games) - 1, winner_id=parsed.winner_id)
    return record.model_copy(update={"games": games, **_started(record, now)})


def update_match(record: GameRecord, index: int, match: PoolMatch | Mapping[str, Any]) -> GameRecord:
    _require_open(record, "update match")
    _require_type(record, "update match", GameType.POOL)
    _check_index(record.games, index, "match")
    games = list(record.games)
    games[index] = match if isinstance(match, PoolMatch) else PoolMatch.model_validate(dict(match))
    logger.info("match updated", block_id=record.block_id, match_index=index)
    return record.model_copy(update={"games": tuple(games)})


def delete_match(record: GameRecord, index: int) -> GameRecord:
    _require_open(record, "delete match")
    _require_type(record, "delete match", GameType.POOL)
    _check_index(record.games, index, "match")
    games = record.games[:index] + record.games[index + 1 :]
    logger.info("match deleted", block_id=record.block_id, match_index=index)
    return record.model_copy(update={"games": games})


def set_darts_scores(
    record: GameRecord,
    scores: Mapping[int, DartsScoreEntry | Mapping[str, Any]],
    now: datetime | None = None,
) -> GameRecord:
    """Store the remaining score (and checkout round) per player; unknown players are dropped."""
    _require_open(record, "set scores")
    _require_type(record, "set scores", GameType.DARTS)
    roster = set(record.player_ids)
    entries: dict[int, DartsScoreEntry] = {}
    for player_id, entry in scores.items():
        if int(player_id) not in roster:
            logger.debug("dropping darts score for a player outside the roster", player_id=player_id)
            continue
        entries[int(player_id)] = entry if isinstance(entry, DartsScoreEntry) else DartsScoreEntry.model_validate(entry)
    logger.info("darts scores set", block_id=record.block_id, player_count=len(entries))
    return record.model_copy(update={"scores": entries, **_started(record, now)})


def complete_game(
    record: GameRecord,
    service: ScoringService | None = None,
    now: datetime | None = None,
) -> GameRecord:
    """
    Mark a game completed and store its results.

    Final scores, positions and winners are computed once here and are read
    back verbatim from then on.
    """
    _require_open(record, "complete")
    scores = (service or ScoringService()).calculate_scores(record)
    completed = record.model_copy(
        update={
            "status": GameStatus.COMPLETED,
            "final_scores": dict(scores.final_scores),
            "positions": dict(scores.positions),
            "winner_ids": scores.winner_ids,
            "winner_id": scores.winner_ids[0] if scores.winner_ids else None,
            "started_at": record.started_at or now or _utcnow(),
            "completed_at": now or _utcnow(),
        },
    )
    logger.info(
        "game completed",
        block_id=record.block_id,
        game_type=record.game_type,
        winner_ids=list(scores.winner_ids),
    )
    return completed


def cancel_game(record: GameRecord) -> GameRecord:
    _require_open(record, "cancel")
    logger.info("game cancelled", block_id=record.block_id)
    return record.model_copy(update={"status": GameStatus.CANCELLED})
