"""
Member report - one staff member's audits in a window.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models import (
    FAIL, PASS, Answer, MemberReport, MemberTrendRow, Question, Run,
    Template, TemplateShare, TopicFailure, member_by_run, name_of,
)
from utils.config import MEMBER_TOP_STANDARDS_N
from utils.metrics import calculate_fail_rate, pct

from analytics.aggregation.aggregator import filter_runs, group_runs, by_template
from analytics.failures.common_failures import QUESTION, analyze_failures, answers_for_runs, by_fail_count
from analytics.rankings.ranking import collation_key


def _tally(answers: Iterable[Answer]) -> Tuple[int, int]:
    """(answered, fails) where answered = PASS + FAIL."""
    answered = 0
    fails = 0
    for answer in answers:
        if answer.value == FAIL:
            fails += 1
            answered += 1
        elif answer.value == PASS:
            answered += 1
    return answered, fails


def _runs_tally(runs: Iterable[Run], answers_by_run: Mapping[str, List[Answer]]) -> Tuple[int, int]:
    return _tally(answers_for_runs(runs, answers_by_run))


def member_report(
    runs: Iterable[Run],
    answers_by_run: Mapping[str, List[Answer]],
    templates: Iterable[Template],
    member_id: str,
    template_id: Optional[str] = None,
) -> MemberReport:
    """
    Audits count, overall fail rate and distribution by template.

    The template distribution is only built when no template filter is
    applied (a filtered report is one template by definition).
    """
    member_runs = filter_runs(runs, member_id=member_id, template_id=template_id)
    answered, fails = _runs_tally(member_runs, answers_by_run)

    by_template_rows: List[TemplateShare] = []
    if template_id is None:
        templates_by_id = {template.id: template for template in templates}
        for tid, template_runs in group_runs(member_runs, by_template).items():
            t_answered, t_fails = _runs_tally(template_runs, answers_by_run)
            by_template_rows.append(TemplateShare(
                template_id=tid,
                template_name=name_of(templates_by_id, tid, 'Audit'),
                audits_count=len(template_runs),
                audits_pct=pct(len(template_runs), len(member_runs)),
                fail_pct=calculate_fail_rate(t_fails, t_answered),
            ))
        by_template_rows.sort(key=lambda row: (-row.audits_count, collation_key(row.template_name)))

    return MemberReport(
        audits_count=len(member_runs),
        overall_fail_pct=calculate_fail_rate(fails, answered),
        by_template=by_template_rows,
    )


def member_trend(
    runs: Iterable[Run],
    answers_by_run: Mapping[str, List[Answer]],
    templates: Iterable[Template],
    member_id: str,
    template_id: Optional[str] = None,
) -> List[MemberTrendRow]:
    """Per-run answered/fail counts, oldest run first."""
    templates_by_id: Dict[str, Template] = {template.id: template for template in templates}
    member_runs = sorted(
        filter_runs(runs, member_id=member_id, template_id=template_id),
        key=lambda run: run.executed_at.timestamp() if run.executed_at else 0.0,
    )

    rows = []
    for run in member_runs:
        answered, fails = _tally(answers_by_run.get(run.id, []))
        rows.append(MemberTrendRow(
            run_id=run.id,
            executed_at=run.executed_at,
            template_name=name_of(templates_by_id, run.template_id, 'Audit'),
            answered=answered,
            fails=fails,
            fail_pct=calculate_fail_rate(fails, answered),
        ))
    return rows


def member_top_standards(
    runs: Iterable[Run],
    answers_by_run: Mapping[str, List[Answer]],
    questions_by_id: Mapping[str, Question],
    member_id: str,
    template_id: Optional[str] = None,
    n: int = MEMBER_TOP_STANDARDS_N,
) -> List[TopicFailure]:
    """The member's most-failed questions."""
    member_runs = filter_runs(runs, member_id=member_id, template_id=template_id)
    topics = analyze_failures(
        answers_for_runs(member_runs, answers_by_run),
        questions_by_id,
        member_by_run(member_runs),
        mode=QUESTION,
    )
    return by_fail_count(topics, n)
