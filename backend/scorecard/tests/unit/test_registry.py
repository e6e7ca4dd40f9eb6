import logging

import pytest

from scorecard.logic.enums import GameType
from scorecard.logic.exceptions import InvalidPlayerCountError, UnsupportedGameTypeError
from scorecard.logic.registry import GameTypeRegistry, build_registry, default_game_types
from scorecard.logic.settings import ScoringSettings
from scorecard.logic.strategies import pool_strategy


class TestDefaultTable:
    @pytest.mark.parametrize(
        ("game_type", "label", "min_players", "max_players"),
        [
            (GameType.DARTS, "Darts", 2, 8),
            (GameType.WIZARD, "Wizard", 3, 6),
            (GameType.PHASE10, "Phase 10", 2, 6),
            (GameType.POOL, "Pool Billiard", 2, 8),
        ],
    )
    def test_limits_and_labels(self, registry, game_type, label, min_players, max_players):
        config = registry.get(game_type)
        assert (config.label, config.min_players, config.max_players) == (label, min_players, max_players)

    def test_pool_uses_pool_strategy(self, registry):
        assert registry.get("pool").scorer is pool_strategy

    def test_wizard_limits_follow_settings(self):
        registry = GameTypeRegistry(default_game_types(ScoringSettings(wizard_min_players=2, wizard_max_players=5)))
        config = registry.get(GameType.WIZARD)
        assert (config.min_players, config.max_players) == (2, 5)


class TestGameTypeRegistry:
    def test_unknown_game_type_raises(self, registry):
        with pytest.raises(UnsupportedGameTypeError, match="unknown game type"):
            registry.get("chess")

    def test_disabled_game_type_raises(self, registry):
        restricted = registry.restricted_to(["darts"])
        with pytest.raises(UnsupportedGameTypeError, match="not enabled"):
            restricted.get(GameType.WIZARD)
        assert restricted.game_types() == [GameType.DARTS]
        assert restricted.is_enabled("darts") is True
        assert restricted.is_enabled("wizard") is False

    def test_label_of_disabled_type_still_resolves(self, registry):
        restricted = registry.restricted_to(["darts"])
        assert restricted.label_of(GameType.POOL) == "Pool Billiard"

    def test_validate_player_count_accepts_range(self, registry):
        registry.validate_player_count(GameType.WIZARD, 3)
        registry.validate_player_count(GameType.WIZARD, 6)

    @pytest.mark.parametrize(("game_type", "count"), [("wizard", 2), ("wizard", 7), ("phase10", 1), ("darts", 9)])
    def test_validate_player_count_rejects_out_of_range(self, registry, game_type, count):
        with pytest.raises(InvalidPlayerCountError) as exc_info:
            registry.validate_player_count(game_type, count)
        assert exc_info.value.player_count == count
        assert exc_info.value.game_type == game_type

    def test_overrides_replace_fields(self, registry):
        tuned = registry.with_overrides({"pool": {"label": "8-Ball", "max_players": 4, "scorer": "ignored"}})
        config = tuned.get(GameType.POOL)
        assert config.label == "8-Ball"
        assert config.max_players == 4
        assert config.scorer is pool_strategy
        assert registry.get(GameType.POOL).label == "Pool Billiard"

    def test_override_for_unknown_type_is_skipped(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="scorecard.logic.registry"):
            tuned = registry.with_overrides({"chess": {"label": "Chess"}})
        assert tuned.game_types() == registry.game_types()
        assert caplog.records[0].msg["event"] == "ignoring override for unknown game type"
        assert caplog.records[0].msg["game_type"] == "chess"


class TestBuildRegistry:
    def test_missing_config_file_uses_defaults(self, tmp_path):
        registry = build_registry(config_path=tmp_path / "missing.yaml")
        assert registry.game_types() == list(GameType)

    def test_yaml_overrides(self, tmp_path):
        config_path = tmp_path / "game_types.yaml"
        config_path.write_text(
            "game_types:\n"
            "  phase10:\n"
            "    enabled: false\n"
            "  darts:\n"
            "    label: Steel Darts\n"
            "    max_players: 4\n",
        )
        registry = build_registry(config_path=config_path)
        assert GameType.PHASE10 not in registry.game_types()
        assert registry.label_of(GameType.DARTS) == "Steel Darts"
        with pytest.raises(InvalidPlayerCountError):
            registry.validate_player_count(GameType.DARTS, 5)

    def test_empty_yaml_file(self, tmp_path):
        config_path = tmp_path / "game_types.yaml"
        config_path.write_text("")
        assert build_registry(config_path=config_path).game_types() == list(GameType)

    def test_enabled_list_restricts(self, tmp_path):
        registry = build_registry(config_path=tmp_path / "missing.yaml", enabled=["pool", "wizard"])
        assert registry.game_types() == [GameType.WIZARD, GameType.POOL]

    def test_enabled_list_cannot_enable_a_disabled_type(self, tmp_path):
        config_path = tmp_path / "game_types.yaml"
        config_path.write_text("game_types:\n  pool:\n    enabled: false\n")
        registry = build_registry(config_path=config_path, enabled=["pool", "darts"])
        assert registry.game_types() == [GameType.DARTS]

    def test_bundled_config_matches_defaults(self):
        registry = build_registry()
        assert registry.label_of(GameType.POOL) == "Pool Billiard"
        assert registry.get(GameType.WIZARD).min_players == 3
