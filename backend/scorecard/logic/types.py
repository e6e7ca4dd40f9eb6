"""
Pydantic models for score card data structures.

Contains the persisted game record (the wire contract shared with the storage
collaborator), the per-game round and match shapes, and the typed results the
scorers hand back to the rendering/API layer.

Wire payloads use camelCase keys and player-keyed maps with stringified ids;
models accept both the alias and the Python field name, and coerce map keys
back to int.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from scorecard.logic.enums import GameStatus, GameType

META_KEY = "_meta"


class WireModel(BaseModel):
    """Frozen model serialized with camelCase aliases."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-compatible wire shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _blank_as_none(value: object) -> object:
    """Editors submit '' for untouched numeric inputs; treat it as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _is_player_key(key: object) -> bool:
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    return isinstance(key, str) and key.strip().isdigit()


def _split_player_entries(data: dict[str, Any]) -> dict[str, Any]:
    """Split a flat wire round (player id keys + `_meta`) into entries and meta."""
    entries = {key: value for key, value in data.items() if _is_player_key(key) and value is not None}
    return {"entries": entries, "meta": data.get(META_KEY)}


class Player(WireModel):
    """Player identity supplied by the collaborator; opaque to the engine."""

    id: int
    name: str
    avatar_url: str | None = None


# ============================================================================
# Wizard
# ============================================================================


class WizardRoundEntry(WireModel):
    """One player's bid and tricks won in a Wizard round."""

    bid: int | None = None
    won: int | None = None

    @field_validator("bid", "won", mode="before")
    @classmethod
    def _blank_counts(cls, v: object) -> object:
        return _blank_as_none(v)

    @property
    def has_bid(self) -> bool:
        return self.bid is not None

    @property
    def is_complete(self) -> bool:
        return self.bid is not None and self.won is not None


class WizardRoundMeta(WireModel):
    """Round-level modifiers. Editor bookkeeping keys (step, bomb) are ignored."""

    werewolf_player_id: int | None = None
    werewolf_adjustment: int = 0

    @field_validator("werewolf_player_id", mode="before")
    @classmethod
    def _blank_player(cls, v: object) -> object:
        return _blank_as_none(v)

    @field_validator("werewolf_adjustment", mode="before")
    @classmethod
    def _blank_adjustment(cls, v: object) -> object:
        v = _blank_as_none(v)
        return 0 if v is None else v


class WizardRound(BaseModel):
    """A Wizard round: entries keyed by player id plus optional `_meta`."""

    model_config = ConfigDict(frozen=True)

    entries: dict[int, WizardRoundEntry] = Field(default_factory=dict)
    meta: WizardRoundMeta | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: object) -> object:
        if isinstance(data, dict) and "entries" not in data:
            return _split_player_entries(data)
        return data

    def entry(self, player_id: int) -> WizardRoundEntry | None:
        return self.entries.get(player_id)

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            str(player_id): entry.model_dump(mode="json", by_alias=True) for player_id, entry in self.entries.items()
        }
        if self.meta is not None:
            wire[META_KEY] = self.meta.model_dump(mode="json", by_alias=True)
        return wire


class WizardRoundCell(WireModel):
    """Display details for one player in one round."""

    bid: int | None = None
    adjustment: int = 0
    effective_bid: int | None = None
    won: int | None = None
    score: int | None = None
    is_correct: bool = False


# ============================================================================
# Phase 10
# ============================================================================


class Phase10RoundEntry(WireModel):
    """One player's penalty points and phase completion for a Phase 10 round."""

    points: int | None = None
    phase_completed: bool = False

    @field_validator("points", mode="before")
    @classmethod
    def _blank_points(cls, v: object) -> object:
        return _blank_as_none(v)

    @field_validator("phase_completed", mode="before")
    @classmethod
    def _falsy_as_false(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and v.strip() in ("", "0")):
            return False
        return v


class Phase10Round(BaseModel):
    """A Phase 10 round: entries keyed by player id."""

    model_config = ConfigDict(frozen=True)

    entries: dict[int, Phase10RoundEntry] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: object) -> object:
        if isinstance(data, dict) and "entries" not in data:
            return {"entries": _split_player_entries(data)["entries"]}
        return data

    def entry(self, player_id: int) -> Phase10RoundEntry | None:
        return self.entries.get(player_id)

    def to_wire(self) -> dict[str, Any]:
        return {
            str(player_id): entry.model_dump(mode="json", by_alias=True) for player_id, entry in self.entries.items()
        }


# ============================================================================
# Darts
# ============================================================================


class DartsScoreEntry(WireModel):
    """Remaining score at game end; 0 means the player checked out."""

    final_score: int
    finished_round: int | None = None

    @field_validator("finished_round", mode="before")
    @classmethod
    def _blank_round(cls, v: object) -> object:
        return _blank_as_none(v)

    @property
    def is_finished(self) -> bool:
        return self.final_score == 0


# ============================================================================
# Pool
# ============================================================================


class PoolMatch(WireModel):
    """A single pool match between two players of the session."""

    player1: int | None = None
    player2: int | None = None
    winner_id: int | None = None
    balls_left: int | None = None
    eight_ball_foul: bool = False

    @field_validator("player1", "player2", "winner_id", "balls_left", mode="before")
    @classmethod
    def _blank_ids(cls, v: object) -> object:
        return _blank_as_none(v)

    @property
    def is_complete(self) -> bool:
        """True when both players and a winner from the pair are recorded."""
        if self.player1 is None or self.player2 is None or self.winner_id is None:
            return False
        if self.player1 == self.player2:
            return False
        return self.winner_id in (self.player1, self.player2)

    @property
    def loser_id(self) -> int | None:
        if not self.is_complete:
            return None
        return self.player2 if self.winner_id == self.player1 else self.player1


class HeadToHead(WireModel):
    """Record of one player against a single opponent."""

    wins: int = 0
    losses: int = 0

    @property
    def differential(self) -> int:
        return self.wins - self.losses


class StandingsRow(WireModel):
    """Engine output per player for standings tables."""

    player_id: int
    score: int | float
    position: int
    wins: int = 0
    losses: int = 0
    win_pct: float = 0.0
    head_to_head: dict[int, HeadToHead] = Field(default_factory=dict)


# ============================================================================
# Persisted record
# ============================================================================


class GameRecord(WireModel):
    """The persisted unit: one score card block instance."""

    block_id: str = ""
    game_type: GameType
    player_ids: tuple[int, ...] = ()
    status: GameStatus = GameStatus.PENDING
    rounds: tuple[dict[str, Any], ...] = ()
    games: tuple[PoolMatch, ...] = ()
    scores: dict[int, DartsScoreEntry] = Field(default_factory=dict)
    final_scores: dict[int, int | float] = Field(default_factory=dict)
    positions: dict[int, int] = Field(default_factory=dict)
    winner_id: int | None = None
    winner_ids: tuple[int, ...] = ()
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("player_ids")
    @classmethod
    def _unique_players(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if len(set(v)) != len(v):
            raise ValueError(f"player_ids must be unique, got {list(v)}")
        return v

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED

    @property
    def has_results(self) -> bool:
        """Completed with stored positions, i.e. usable by the evening summary."""
        return self.is_completed and bool(self.positions)


# ============================================================================
# Scorer results
# ============================================================================


class DartsResult(WireModel):
    winner_ids: tuple[int, ...] = ()
    positions: dict[int, int] = Field(default_factory=dict)
    final_scores: dict[int, int] = Field(default_factory=dict)


class WizardResult(WireModel):
    running_totals: dict[int, tuple[int, ...]] = Field(default_factory=dict)
    final_scores: dict[int, int] = Field(default_factory=dict)
    positions: dict[int, int] = Field(default_factory=dict)
    cells: tuple[dict[int, WizardRoundCell], ...] = ()
    current_round: int = 0
    completed_rounds: int = 0
    total_rounds: int = 0
    has_incomplete_round: bool = False
    can_add_round: bool = False
    can_continue_round: bool = False
    can_edit_last_round: bool = False
    can_complete: bool = False


class Phase10Result(WireModel):
    running_totals: dict[int, tuple[int, ...]] = Field(default_factory=dict)
    final_scores: dict[int, int] = Field(default_factory=dict)
    positions: dict[int, int] = Field(default_factory=dict)
    current_phases: dict[int, int] = Field(default_factory=dict)
    completed_phase_counts: dict[int, int] = Field(default_factory=dict)
    completers: tuple[int, ...] = ()
    current_round: int = 0


class PoolResult(WireModel):
    standings: tuple[StandingsRow, ...] = ()
    positions: dict[int, int] = Field(default_factory=dict)
    final_scores: dict[int, int | float] = Field(default_factory=dict)
    is_frozen: bool = False


class EveningSummaryRow(WireModel):
    player_id: int
    total_points: int
    per_game_position: tuple[int | None, ...] = ()
    per_game_points: tuple[int | None, ...] = ()
    overall_position: int


class EveningSummary(WireModel):
    rows: tuple[EveningSummaryRow, ...] = ()
    game_labels: tuple[str, ...] = ()
    has_results: bool = False


class GameScores(WireModel):
    """Uniform strategy output: what every call site needs from a scorer."""

    game_type: GameType
    final_scores: dict[int, int | float] = Field(default_factory=dict)
    positions: dict[int, int] = Field(default_factory=dict)
    winner_ids: tuple[int, ...] = ()
    is_frozen: bool = False
    details: DartsResult | WizardResult | Phase10Result | PoolResult | None = None
