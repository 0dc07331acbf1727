"""
Member fail-rate ranking for people analytics.

Fail rate is computed over answered questions (PASS + FAIL); NA and
unanswered questions never count. A member with nothing answered has no
fail rate (None) and sorts last whichever way the table is sorted.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from models import FAIL, PASS, Answer, Member, MemberRankingRow, Run
from utils.metrics import calculate_fail_rate

from analytics.aggregation.aggregator import filter_runs
from analytics.rankings.ranking import SortState


def member_ranking(
    runs: Iterable[Run],
    answers_by_run: Mapping[str, List[Answer]],
    members: Iterable[Member],
    template_id: Optional[str] = None,
    sort_state: Optional[SortState] = None,
) -> List[MemberRankingRow]:
    """
    One row per executor with runs: audits, answered, fails, fail rate, last audit.

    Args:
        runs: Eligible runs already restricted to the window
        answers_by_run: Answers keyed by run id
        members: Roster used for labels; only executors with runs are listed
        template_id: Only count runs of this template
        sort_state: Defaults to fail_rate_pct descending

    Returns:
        Sorted MemberRankingRows (ties broken by name)
    """
    sort_state = sort_state or SortState()
    members_by_id: Dict[str, Member] = {member.id: member for member in members}

    stats: Dict[str, dict] = {}

    for run in filter_runs(runs, template_id=template_id):
        if not run.member_id:
            continue
        entry = stats.setdefault(run.member_id, {'audits': 0, 'passes': 0, 'fails': 0, 'last': None})
        entry['audits'] += 1
        for answer in answers_by_run.get(run.id, []):
            if answer.value == PASS:
                entry['passes'] += 1
            elif answer.value == FAIL:
                entry['fails'] += 1
        last: Optional[datetime] = entry['last']
        if run.executed_at is not None and (last is None or run.executed_at > last):
            entry['last'] = run.executed_at

    rows = []
    for member_id, entry in stats.items():
        member = members_by_id.get(member_id)
        answered = entry['passes'] + entry['fails']
        rows.append(MemberRankingRow(
            member_id=member_id,
            name=member.name if member else '—',
            position=member.position if member else None,
            employee_number=member.employee_number if member else None,
            audits_count=entry['audits'],
            answered=answered,
            fails=entry['fails'],
            fail_rate_pct=calculate_fail_rate(entry['fails'], answered),
            last_audit_at=entry['last'],
        ))

    return sort_state.apply(rows)
