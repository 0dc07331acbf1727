"""
Hotel Audit Analytics - Score Calculator Unit Tests

Tests the per-run PASS/FAIL/NA tally:
- Denominator excludes NA
- Missing answers count as PASS
- All-NA runs score None, never 0 or 100
- Inactive and unknown questions are out of scope

Priority: P0 - Every stored score comes from this formula
"""

import pytest

from analytics.calculators import ScoreCalculator, score_run
from models import Answer, Question


class TestRunScoring:
    """Test ScoreCalculator.calculate() on whole runs."""

    def test_mixed_answers_scenario(self, ten_questions, make_answers):
        """
        7 PASS, 2 FAIL, 1 NA over 10 active questions.

        Given: Answers for every active question
        When: The run is scored
        Then: denom=9, pass=7, score=77.78
        """
        values = {f"q-{i}": 'PASS' for i in range(1, 8)}
        values.update({'q-8': 'FAIL', 'q-9': 'FAIL', 'q-10': 'NA'})

        result = ScoreCalculator(ten_questions).calculate(make_answers('r-1', values))

        assert result.total == 10
        assert result.fail_count == 2
        assert result.na_count == 1
        assert result.denom == 9
        assert result.pass_count == 7
        assert result.score == 77.78

    def test_unanswered_run_scores_full_marks(self, make_answers):
        """
        A run with no recorded answers counts every question as PASS.

        Given: 5 questions, 0 answers
        When: The run is scored
        Then: score=100.0
        """
        questions = [Question(id=f"q-{i}", text=f"Q{i}") for i in range(5)]

        result = score_run(questions, [])

        assert result.denom == 5
        assert result.pass_count == 5
        assert result.score == 100.0

    def test_partial_answers_default_to_pass(self, ten_questions, make_answers):
        """Only the recorded FAIL lowers the score; the 9 missing answers are PASS."""
        result = score_run(ten_questions, make_answers('r-1', {'q-3': 'FAIL'}))

        assert result.fail_count == 1
        assert result.pass_count == 9
        assert result.score == 90.0

    def test_all_na_scores_none(self, make_answers):
        """denom == 0 must yield None, never 0 or 100."""
        questions = [Question(id='q-1', text='A'), Question(id='q-2', text='B')]

        result = score_run(questions, make_answers('r-1', {'q-1': 'NA', 'q-2': 'NA'}))

        assert result.denom == 0
        assert result.score is None

    def test_no_active_questions_scores_none(self):
        """A template with no active questions has nothing to score."""
        questions = [Question(id='q-1', text='A', active=False)]

        assert score_run(questions, []).score is None

    def test_inactive_question_answers_ignored(self, ten_questions, make_answers):
        """A FAIL on a retired question does not count."""
        result = score_run(ten_questions, make_answers('r-1', {'q-old': 'FAIL'}))

        assert result.total == 10
        assert result.fail_count == 0
        assert result.score == 100.0

    def test_unknown_question_answers_ignored(self, ten_questions, make_answers):
        """Answers to questions outside the template are out of scope."""
        result = score_run(ten_questions, make_answers('r-1', {'q-999': 'FAIL'}))

        assert result.fail_count == 0

    def test_unrecognized_value_counts_as_pass(self, ten_questions):
        """An answer whose value was normalized to None defaults to PASS."""
        answers = [Answer(run_id='r-1', question_id='q-1', value=None)]

        assert score_run(ten_questions, answers).score == 100.0

    def test_later_answer_wins(self, ten_questions):
        """When a question is answered twice the last answer is used."""
        answers = [
            Answer(run_id='r-1', question_id='q-1', value='FAIL'),
            Answer(run_id='r-1', question_id='q-1', value='PASS'),
        ]

        assert score_run(ten_questions, answers).fail_count == 0

    def test_switching_pass_to_na_never_lowers_score(self, ten_questions, make_answers):
        """NA only shrinks the denominator."""
        base = {'q-1': 'FAIL', 'q-2': 'PASS'}
        with_na = {'q-1': 'FAIL', 'q-2': 'NA'}

        before = score_run(ten_questions, make_answers('r-1', base)).score
        after = score_run(ten_questions, make_answers('r-1', with_na)).score

        assert after >= before

    @pytest.mark.parametrize("fails,expected", [(0, 100.0), (3, 70.0), (10, 0.0)])
    def test_score_stays_within_bounds(self, ten_questions, make_answers, fails, expected):
        """Scores are always inside [0, 100]."""
        values = {f"q-{i}": 'FAIL' for i in range(1, fails + 1)}

        result = score_run(ten_questions, make_answers('r-1', values))

        assert result.score == expected
        assert 0.0 <= result.score <= 100.0

    def test_breakdown_to_dict(self, ten_questions):
        """to_dict() returns primitives only."""
        data = score_run(ten_questions, []).to_dict()

        assert data == {
            "total": 10,
            "fail_count": 0,
            "na_count": 0,
            "denom": 10,
            "pass_count": 10,
            "score": 100.0,
        }
