"""Engine configuration via environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import field_validator
from pydantic_settings import BaseSettings

from scorecard.logic.enums import GameType
from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class EngineSettings(BaseSettings):
    model_config = {"env_prefix": "SCORECARD_"}

    log_dir: str | None = None
    game_types_config: Path | None = None
    enabled_game_types: list[str] = [game_type.value for game_type in GameType]
    cors_origins: list[str] = ["http://localhost:8080"]
    # Unset: pool ties order by the block id alone; evenings by their container id.
    tie_break_seed: str | None = None

    @field_validator("log_dir")
    @classmethod
    def validate_log_dir(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("log_dir must not be empty")
        return v

    @field_validator("tie_break_seed", mode="before")
    @classmethod
    def validate_tie_break_seed(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)

    @field_validator("enabled_game_types", mode="before")
    @classmethod
    def validate_enabled_game_types(cls, v: str | list[str]) -> list[str]:
        names = [name.lower() for name in parse_string_list(v)]
        unknown = sorted(set(names) - {game_type.value for game_type in GameType})
        if unknown:
            raise ValueError(f"unknown game types: {', '.join(unknown)}")
        return names

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings
