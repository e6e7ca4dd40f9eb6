"""Request payloads accepted by the scoring HTTP API."""

from pydantic import Field

from scorecard.logic.types import GameRecord, WireModel


class EveningSummaryRequest(WireModel):
    records: tuple[GameRecord, ...] = ()
    all_player_ids: tuple[int, ...] | None = None
    container_id: str | None = Field(default=None, min_length=1)
