"""
Section sub-scores.

A run's score per section uses the run formula scoped to the section's
active questions (missing answers still count as PASS). Cross-run rollups
group by section *name*, so "Safety" can be compared across templates
that each define their own "Safety" section.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models import FAIL, NA, Answer, Question, Run, Section, SectionScore
from utils.metrics import calculate_score

from analytics.aggregation.aggregator import average_values


def section_question_totals(questions: Iterable[Question]) -> Dict[str, int]:
    """Number of active questions per section id."""
    totals: Dict[str, int] = {}
    for question in questions:
        if question.active and question.section_id is not None:
            totals[question.section_id] = totals.get(question.section_id, 0) + 1
    return totals


def run_section_exceptions(
    answers: Iterable[Answer],
    questions_by_id: Mapping[str, Question],
) -> Dict[str, Tuple[int, int]]:
    """
    FAIL and NA counts per section id for one run's answers.

    Answers to unknown or inactive questions are ignored.
    """
    latest: Dict[str, Optional[str]] = {a.question_id: a.value for a in answers}
    counts: Dict[str, List[int]] = {}
    for question_id, value in latest.items():
        question = questions_by_id.get(question_id)
        if question is None or not question.active or question.section_id is None:
            continue
        tally = counts.setdefault(question.section_id, [0, 0])
        if value == FAIL:
            tally[0] += 1
        elif value == NA:
            tally[1] += 1
    return {section_id: (fail, na) for section_id, (fail, na) in counts.items()}


def per_run_section_scores(
    run: Run,
    answers: Iterable[Answer],
    sections: Iterable[Section],
    questions: Sequence[Question],
) -> List[Tuple[str, Optional[float]]]:
    """
    (section name, score) for every section of the run's template.

    A section whose questions are all NA (or which has no active
    questions) scores None.
    """
    totals = section_question_totals(questions)
    exceptions = run_section_exceptions(answers, {q.id: q for q in questions})

    scores = []
    for section in sections:
        if section.template_id != run.template_id:
            continue
        fail, na = exceptions.get(section.id, (0, 0))
        _, _, score = calculate_score(totals.get(section.id, 0), fail, na)
        scores.append((section.name, score))
    return scores


def rollup_by_section_name(
    runs: Iterable[Run],
    answers_by_run: Mapping[str, List[Answer]],
    sections: Sequence[Section],
    questions: Sequence[Question],
) -> List[SectionScore]:
    """
    Average per-run section scores grouped by section name.

    Returns:
        SectionScores sorted worst first; sections that never produced a
        score (avg None) come last, then by name
    """
    by_name: Dict[str, List[Optional[float]]] = {}
    for run in runs:
        for name, score in per_run_section_scores(run, answers_by_run.get(run.id, []), sections, questions):
            by_name.setdefault(name, []).append(score)

    rows = []
    for name, scores in by_name.items():
        agg = average_values(scores)
        rows.append(SectionScore(section_name=name, avg_score=agg.avg, count=agg.count))

    return sorted(rows, key=lambda row: (row.avg_score is None, row.avg_score or 0.0, row.section_name))


def worst_section(rows: Sequence[SectionScore]) -> Optional[SectionScore]:
    """First scored section of a rollup_by_section_name() result."""
    scored = [row for row in rows if row.avg_score is not None]
    return scored[0] if scored else None


def best_section(rows: Sequence[SectionScore]) -> Optional[SectionScore]:
    """Last scored section of a rollup_by_section_name() result."""
    scored = [row for row in rows if row.avg_score is not None]
    return scored[-1] if scored else None
