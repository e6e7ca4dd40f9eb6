"""Centralized scoring settings - all configurable scoring constants."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from scorecard.logic.exceptions import UnsupportedSettingsError


class ScoringSettings(BaseModel):
    """
    Centralized configuration for all score card formulas.

    All fields have default values matching the house rules the score cards
    were built for.
    """

    model_config = ConfigDict(frozen=True)

    # --- Darts ---
    darts_starting_score: int = 501

    # --- Wizard ---
    wizard_total_cards: int = 60
    wizard_min_players: int = 3
    wizard_max_players: int = 6
    wizard_exact_bid_base: int = 20
    wizard_points_per_trick: int = 10
    wizard_miss_penalty_per_trick: int = 10

    # --- Phase 10 ---
    phase10_phase_count: int = 10

    # --- Pool ---
    pool_win_points: int = 3  # 1 point for playing + 2 for winning
    pool_loss_points: int = 1
    win_pct_digits: int = 4


DEFAULT_SCORING_SETTINGS = ScoringSettings()


def validate_settings(settings: ScoringSettings) -> None:
    """Validate that all settings values are usable by the scorers.

    Raises UnsupportedSettingsError listing every offending value.
    """
    errors: list[str] = []

    if settings.darts_starting_score <= 0:
        errors.append(f"darts_starting_score={settings.darts_starting_score} must be positive")

    if settings.wizard_total_cards <= 0:
        errors.append(f"wizard_total_cards={settings.wizard_total_cards} must be positive")

    if not (0 < settings.wizard_min_players <= settings.wizard_max_players):
        errors.append(
            f"wizard player range {settings.wizard_min_players}-{settings.wizard_max_players} is not valid",
        )

    if settings.phase10_phase_count <= 0:
        errors.append(f"phase10_phase_count={settings.phase10_phase_count} must be positive")

    if settings.pool_win_points < settings.pool_loss_points:
        errors.append(
            f"pool_win_points={settings.pool_win_points} is lower than pool_loss_points={settings.pool_loss_points}",
        )

    if settings.win_pct_digits < 0:
        errors.append(f"win_pct_digits={settings.win_pct_digits} must not be negative")

    if errors:
        raise UnsupportedSettingsError("; ".join(errors))
