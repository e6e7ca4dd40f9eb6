"""Typed domain exceptions for score card rule violations.

Scorers never raise these: partial or malformed round data is the normal
in-progress state and is handled as "not complete yet". They are raised by
the registry and the record lifecycle helpers, i.e. at the boundary where the
collaborator layer decides whether to accept a change.
"""


class ScoreCardError(Exception):
    """Base exception for score card rule violations."""


class UnsupportedGameTypeError(ScoreCardError):
    """Game type is unknown or disabled in the registry."""


class UnsupportedSettingsError(ScoreCardError):
    """Scoring settings contain values the engine cannot work with."""


class InvalidPlayerCountError(ScoreCardError):
    """Number of players is outside the range supported by the game type.

    Attributes:
        game_type: The game type value (e.g. "wizard").
        player_count: The number of players that was requested.
        min_players: Smallest supported roster size.
        max_players: Largest supported roster size.

    """

    def __init__(self, *, game_type: str, player_count: int, min_players: int, max_players: int) -> None:
        self.game_type = game_type
        self.player_count = player_count
        self.min_players = min_players
        self.max_players = max_players
        super().__init__(
            f"{game_type} needs {min_players}-{max_players} players, got {player_count}",
        )


class GameRecordStateError(ScoreCardError):
    """Transition is not allowed in the record's current status."""


class RoundIndexError(ScoreCardError):
    """Round or match index does not exist in the record."""
