"""
ScoreCalculator - Single Source of Truth for run scores.

Key Formula:
    denom = max(0, active_questions - NA)
    pass  = max(0, denom - FAIL)
    score = None if denom == 0 else round(pass / denom * 100, 2)

Policies:
    - Only active questions of the run's template are in scope; answers to
      anything else are ignored.
    - A question with no recorded answer counts as PASS (the data-entry
      screens seed every question as PASS, and historical partial runs are
      read the same way).
    - The surfaced score is clamped to [0, 100].

The calculator is pure: it holds the question set only and can be reused
for any number of runs of the same template.
"""
from typing import Dict, Iterable, Optional

from models import FAIL, NA, Answer, Question, ScoreBreakdown, value_or_default_pass
from utils.metrics import calculate_score, clamp_score


class ScoreCalculator:
    """
    Scores runs of one template.

    Usage:
        calc = ScoreCalculator(template_questions)
        breakdown = calc.calculate(run_answers)
    """

    def __init__(self, questions: Iterable[Question]):
        """
        Args:
            questions: The template's questions (inactive ones are skipped)
        """
        self.question_ids = [q.id for q in questions if q.active]

    def calculate(self, answers: Iterable[Answer]) -> ScoreBreakdown:
        """
        Tally one run's answers against the active questions.

        Args:
            answers: The run's answers, possibly partial; when a question is
                     answered twice the later answer wins

        Returns:
            ScoreBreakdown (score is None when every question is NA)
        """
        by_question: Dict[str, Optional[str]] = {a.question_id: a.value for a in answers}

        fail_count = 0
        na_count = 0
        for question_id in self.question_ids:
            value = value_or_default_pass(by_question.get(question_id))
            if value == FAIL:
                fail_count += 1
            elif value == NA:
                na_count += 1

        total = len(self.question_ids)
        denom, pass_count, score = calculate_score(total, fail_count, na_count)
        return ScoreBreakdown(
            total=total,
            fail_count=fail_count,
            na_count=na_count,
            denom=denom,
            pass_count=pass_count,
            score=clamp_score(score),
        )


def score_run(questions: Iterable[Question], answers: Iterable[Answer]) -> ScoreBreakdown:
    """Score a single run without keeping a calculator around."""
    return ScoreCalculator(questions).calculate(answers)
