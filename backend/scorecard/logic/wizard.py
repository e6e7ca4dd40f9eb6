"""
Wizard scoring.

Each round every player bids the number of tricks they expect to win. An exact
bid scores 20 plus 10 per trick; a miss costs 10 per trick of difference.
The optional werewolf modifier shifts exactly one player's bid for a round.

Rounds are recorded in two steps (bids first, then tricks won), so the last
round is often incomplete: entries without `won` contribute nothing yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorecard.logic.ranking import rank
from scorecard.logic.settings import DEFAULT_SCORING_SETTINGS, ScoringSettings
from scorecard.logic.types import WizardResult, WizardRound, WizardRoundCell

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = structlog.get_logger()


def total_rounds(player_count: int, settings: ScoringSettings = DEFAULT_SCORING_SETTINGS) -> int:
    """Number of rounds for a full game: all cards dealt out. 0 when unsupported."""
    if not (settings.wizard_min_players <= player_count <= settings.wizard_max_players):
        return 0
    return settings.wizard_total_cards // player_count


def calculate_round_score(
    effective_bid: int,
    won: int,
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> int:
    if effective_bid == won:
        return settings.wizard_exact_bid_base + won * settings.wizard_points_per_trick
    return -settings.wizard_miss_penalty_per_trick * abs(effective_bid - won)


def werewolf_adjustment(round_: WizardRound, player_id: int) -> int:
    """Bid offset applied to this player in this round (0 unless they are the werewolf)."""
    meta = round_.meta
    if meta is None or meta.werewolf_player_id != player_id:
        return 0
    return meta.werewolf_adjustment


def effective_bid(round_: WizardRound, player_id: int) -> int | None:
    """Bid including the werewolf adjustment, or None when no bid was placed."""
    entry = round_.entry(player_id)
    if entry is None or entry.bid is None:
        return None
    return entry.bid + werewolf_adjustment(round_, player_id)


def is_round_incomplete(round_: WizardRound, player_ids: Sequence[int]) -> bool:
    """True when any roster player has bid but no tricks won recorded."""
    for player_id in player_ids:
        entry = round_.entry(player_id)
        if entry is not None and entry.has_bid and entry.won is None:
            return True
    return False


def round_cells(
    round_: WizardRound,
    player_ids: Sequence[int],
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> dict[int, WizardRoundCell]:
    """Per-player display details for one round."""
    cells: dict[int, WizardRoundCell] = {}
    for player_id in player_ids:
        entry = round_.entry(player_id)
        bid = entry.bid if entry else None
        won = entry.won if entry else None
        adjustment = werewolf_adjustment(round_, player_id)
        eff_bid = effective_bid(round_, player_id)
        score = calculate_round_score(eff_bid, won, settings) if eff_bid is not None and won is not None else None
        cells[player_id] = WizardRoundCell(
            bid=bid,
            adjustment=adjustment,
            effective_bid=eff_bid,
            won=won,
            score=score,
            is_correct=eff_bid is not None and won is not None and eff_bid == won,
        )
    return cells


def _parse_rounds(rounds: Sequence[WizardRound | Mapping[str, object]]) -> list[WizardRound]:
    return [r if isinstance(r, WizardRound) else WizardRound.model_validate(r) for r in rounds]


def score_wizard(
    rounds: Sequence[WizardRound | Mapping[str, object]],
    player_ids: Sequence[int],
    settings: ScoringSettings = DEFAULT_SCORING_SETTINGS,
) -> WizardResult:
    """
    Compute running totals, standings and progress for a Wizard game.

    Higher total wins; tied totals share a position.
    """
    parsed = _parse_rounds(rounds)

    running_totals: dict[int, tuple[int, ...]] = {}
    final_scores: dict[int, int] = {}
    for player_id in player_ids:
        total = 0
        totals: list[int] = []
        for round_ in parsed:
            entry = round_.entry(player_id)
            if entry is not None and entry.is_complete:
                total += calculate_round_score(effective_bid(round_, player_id), entry.won, settings)  # type: ignore[arg-type]
            totals.append(total)
        running_totals[player_id] = tuple(totals)
        final_scores[player_id] = total

    for index, round_ in enumerate(parsed):
        if round_.meta is not None and round_.meta.werewolf_player_id not in (None, *player_ids):
            logger.debug(
                "werewolf refers to a player outside the roster",
                round_index=index,
                werewolf_player_id=round_.meta.werewolf_player_id,
            )

    sorted_ids = sorted(player_ids, key=lambda player_id: -final_scores[player_id])
    positions = rank(sorted_ids, final_scores.__getitem__)

    current_round = len(parsed)
    has_incomplete_round = bool(parsed) and is_round_incomplete(parsed[-1], player_ids)
    completed_rounds = current_round - 1 if has_incomplete_round else current_round
    rounds_needed = total_rounds(len(player_ids), settings)

    return WizardResult(
        running_totals=running_totals,
        final_scores=final_scores,
        positions=positions,
        cells=tuple(round_cells(round_, player_ids, settings) for round_ in parsed),
        current_round=current_round,
        completed_rounds=completed_rounds,
        total_rounds=rounds_needed,
        has_incomplete_round=has_incomplete_round,
        can_add_round=not has_incomplete_round and current_round < rounds_needed,
        can_continue_round=has_incomplete_round,
        can_edit_last_round=current_round > 0 and not has_incomplete_round,
        can_complete=rounds_needed > 0 and completed_rounds >= rounds_needed,
    )
