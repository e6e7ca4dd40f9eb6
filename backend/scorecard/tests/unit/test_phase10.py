from scorecard.logic.phase10 import score_phase10
from scorecard.logic.settings import ScoringSettings
from scorecard.logic.types import Phase10Round
from scorecard.tests.conftest import phase10_round

A, B, C = 1, 2, 3


def _ten_rounds() -> list[dict]:
    """A: 12 points and a phase every round; B: 8 points, misses one phase; C: 0 points, 3 phases."""
    return [phase10_round({A: (12, True), B: (8, index != 4), C: (0, index < 3)}) for index in range(10)]


class TestScorePhase10:
    def test_completer_ranks_above_lower_total(self):
        result = score_phase10(_ten_rounds(), [A, B, C])
        assert result.final_scores == {A: 120, B: 80, C: 0}
        assert result.completers == (A,)
        assert result.positions == {A: 1, B: 3, C: 2}

    def test_phase_progress(self):
        result = score_phase10(_ten_rounds(), [A, B, C])
        assert result.completed_phase_counts == {A: 10, B: 9, C: 3}
        assert result.current_phases == {A: 10, B: 10, C: 4}
        assert result.current_round == 10

    def test_lower_total_wins_among_non_completers(self):
        rounds = [phase10_round({A: (25, True), B: (5, False), C: (25, True)})]
        result = score_phase10(rounds, [A, B, C])
        assert result.positions == {B: 1, A: 2, C: 2}
        assert result.running_totals == {A: (25,), B: (5,), C: (25,)}

    def test_completions_need_not_be_consecutive(self):
        rounds = [phase10_round({A: (0, index % 2 == 0)}) for index in range(20)]
        result = score_phase10(rounds, [A, B])
        assert result.completers == (A,)
        assert result.positions == {A: 1, B: 2}

    def test_falsy_wire_values(self):
        rounds = [
            {"1": {"points": "", "phaseCompleted": "0"}, "2": {"points": 10, "phaseCompleted": None}},
            {"1": {"points": "15", "phaseCompleted": "1"}, "2": {"points": 5, "phaseCompleted": True}},
        ]
        result = score_phase10(rounds, [A, B])
        assert result.final_scores == {A: 15, B: 15}
        assert result.completed_phase_counts == {A: 1, B: 1}
        assert result.running_totals == {A: (0, 15), B: (10, 15)}

    def test_accepts_parsed_rounds(self):
        round_ = Phase10Round.model_validate(phase10_round({A: (3, True)}))
        result = score_phase10([round_], [A])
        assert result.final_scores == {A: 3}

    def test_custom_phase_count(self):
        rounds = [phase10_round({A: (40, True), B: (0, False)})] * 2
        result = score_phase10(rounds, [A, B], ScoringSettings(phase10_phase_count=2))
        assert result.completers == (A,)
        assert result.current_phases == {A: 2, B: 1}
        assert result.positions == {A: 1, B: 2}

    def test_no_rounds(self):
        result = score_phase10([], [A, B])
        assert result.final_scores == {A: 0, B: 0}
        assert result.positions == {A: 1, B: 1}
        assert result.current_phases == {A: 1, B: 1}
        assert result.completers == ()
