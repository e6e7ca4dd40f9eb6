import pytest

from scorecard.logic.exceptions import UnsupportedSettingsError
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings, validate_settings


class TestScoringSettings:
    def test_defaults(self):
        settings = DEFAULT_SCORING_SETTINGS
        assert settings.darts_starting_score == 501
        assert (settings.pool_win_points, settings.pool_loss_points) == (3, 1)
        assert settings.wizard_total_cards == 60
        assert settings.phase10_phase_count == 10
        assert settings.win_pct_digits == 4

    def test_defaults_are_valid(self):
        validate_settings(DEFAULT_SCORING_SETTINGS)


class TestValidateSettings:
    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"darts_starting_score": 0}, "darts_starting_score=0 must be positive"),
            ({"wizard_total_cards": -60}, "wizard_total_cards=-60 must be positive"),
            ({"wizard_min_players": 5, "wizard_max_players": 3}, "wizard player range 5-3 is not valid"),
            ({"wizard_min_players": 0}, "wizard player range 0-6 is not valid"),
            ({"phase10_phase_count": 0}, "phase10_phase_count=0 must be positive"),
            ({"pool_win_points": 1, "pool_loss_points": 3}, "pool_win_points=1 is lower than pool_loss_points=3"),
            ({"win_pct_digits": -1}, "win_pct_digits=-1 must not be negative"),
        ],
    )
    def test_rejects_unusable_values(self, overrides, message):
        with pytest.raises(UnsupportedSettingsError, match=message):
            validate_settings(ScoringSettings(**overrides))

    def test_reports_every_error(self):
        with pytest.raises(UnsupportedSettingsError) as exc_info:
            validate_settings(ScoringSettings(darts_starting_score=0, phase10_phase_count=0))
        assert str(exc_info.value) == "darts_starting_score=0 must be positive; phase10_phase_count=0 must be positive"
