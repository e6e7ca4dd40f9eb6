"""
Game-type registry: the explicit table of supported game types.

Every game type maps to its display label, supported roster size and scoring
strategy. The table is built once at startup (`build_registry`) and can be
narrowed or tuned from a YAML file and an allow-list of enabled types.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
import yaml

from scorecard.logic.enums import GameType
from scorecard.logic.exceptions import InvalidPlayerCountError, UnsupportedGameTypeError
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings
from scorecard.logic.strategies import darts_strategy, phase10_strategy, pool_strategy, wizard_strategy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from scorecard.logic.strategies import Scorer

logger = structlog.get_logger()

_OVERRIDABLE_FIELDS = ("label", "min_players", "max_players", "enabled")


def _get_default_config_path() -> Path:
    """Return the file-relative default path to game_types.yaml."""
    backend_root = Path(__file__).parent.parent.parent
    return backend_root / "config" / "game_types.yaml"


@dataclass(frozen=True)
class GameTypeConfig:
    game_type: GameType
    label: str
    min_players: int
    max_players: int
    scorer: Scorer
    enabled: bool = True

    def supports(self, player_count: int) -> bool:
        return self.min_players <= player_count <= self.max_players


def default_game_types(settings: ScoringSettings = DEFAULT_SCORING_SETTINGS) -> list[GameTypeConfig]:
    return [
        GameTypeConfig(GameType.DARTS, "Darts", 2, 8, darts_strategy),
        GameTypeConfig(
            GameType.WIZARD,
            "Wizard",
            settings.wizard_min_players,
            settings.wizard_max_players,
            wizard_strategy,
        ),
        GameTypeConfig(GameType.PHASE10, "Phase 10", 2, 6, phase10_strategy),
        GameTypeConfig(GameType.POOL, "Pool Billiard", 2, 8, pool_strategy),
    ]


class GameTypeRegistry:
    def __init__(self, configs: Iterable[GameTypeConfig]) -> None:
        self._configs: dict[GameType, GameTypeConfig] = {config.game_type: config for config in configs}

    def get(self, game_type: GameType | str) -> GameTypeConfig:
        """Return the config of an enabled game type or raise UnsupportedGameTypeError."""
        try:
            resolved = GameType(game_type)
        except ValueError:
            raise UnsupportedGameTypeError(f"unknown game type {game_type!r}") from None
        config = self._configs.get(resolved)
        if config is None or not config.enabled:
            raise UnsupportedGameTypeError(f"game type {resolved.value!r} is not enabled")
        return config

    def is_enabled(self, game_type: GameType | str) -> bool:
        try:
            self.get(game_type)
        except UnsupportedGameTypeError:
            return False
        return True

    def game_types(self) -> list[GameType]:
        return [game_type for game_type, config in self._configs.items() if config.enabled]

    def label_of(self, game_type: GameType | str) -> str:
        """Display label; falls back to the capitalized value for disabled types."""
        config = self._configs.get(GameType(game_type))
        if config is None:
            return GameType(game_type).value.capitalize()
        return config.label

    def validate_player_count(self, game_type: GameType | str, player_count: int) -> None:
        config = self.get(game_type)
        if not config.supports(player_count):
            raise InvalidPlayerCountError(
                game_type=config.game_type.value,
                player_count=player_count,
                min_players=config.min_players,
                max_players=config.max_players,
            )

    def with_overrides(self, overrides: Mapping[str, Mapping[str, Any]]) -> GameTypeRegistry:
        """Return a new registry with per-type fields replaced; unknown types are skipped."""
        configs = dict(self._configs)
        for name, fields in overrides.items():
            try:
                game_type = GameType(name)
            except ValueError:
                logger.warning("ignoring override for unknown game type", game_type=name)
                continue
            changes = {key: value for key, value in (fields or {}).items() if key in _OVERRIDABLE_FIELDS}
            configs[game_type] = replace(configs[game_type], **changes)
        return GameTypeRegistry(configs.values())

    def restricted_to(self, enabled: Iterable[str]) -> GameTypeRegistry:
        """Return a new registry where only the named game types stay enabled."""
        names = set(enabled)
        for name in names - {game_type.value for game_type in self._configs}:
            logger.warning("ignoring unknown game type in enabled list", game_type=name)
        return GameTypeRegistry(
            replace(config, enabled=config.enabled and config.game_type.value in names)
            for config in self._configs.values()
        )


def _load_overrides(config_path: Path) -> dict[str, dict[str, Any]]:
    if not config_path.exists():
        return {}

    with config_path.open() as f:
        config = yaml.safe_load(f) or {}

    return config.get("game_types", {}) or {}


def build_registry(
    config_path: Path | None = None,
    enabled: Iterable[str] | None = None,
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> GameTypeRegistry:
    """
    Build the registry used for the lifetime of the process.

    Starts from the built-in table, applies overrides from `config_path`
    (default `backend/config/game_types.yaml`, silently skipped when absent)
    and finally keeps only the `enabled` game types when a list is given.
    """
    registry = GameTypeRegistry(default_game_types(settings))
    overrides = _load_overrides(config_path or _get_default_config_path())
    if overrides:
        registry = registry.with_overrides(overrides)
    if enabled is not None:
        registry = registry.restricted_to(enabled)
    logger.debug("game type registry built", game_types=[game_type.value for game_type in registry.game_types()])
    return registry


DEFAULT_REGISTRY = GameTypeRegistry(default_game_types())
