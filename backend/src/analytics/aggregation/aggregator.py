"""
Aggregator - averages of stored run scores, grouped and windowed.

Every average in the engine goes through average_values(), so the edge-case
policy lives in one place:

    - only finite scores inside [0, 100] count, anything else is skipped
    - the mean is rounded to 2 decimals
    - no eligible score -> ScoreAgg(avg=None, count=0), never 0

Grouping is plain filter-then-average. The key functions below compose
through aggregate(), e.g. aggregate(runs, [by_area, by_month]).

Run timestamps are hotel-local (Run.from_row localizes them), so the
calendar key functions read year/month straight off executed_at. Window
based helpers compare instants and work for any zone.
"""
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from models import EMPTY_SCORE, Run, ScoreAgg
from utils.logger import log_normalized_records
from utils.metrics import coerce_score, round_score

from analytics.periods import (
    THIS_MONTH, THIS_QUARTER, THIS_YEAR, TimeWindow,
    month_range, quarter_of, quarter_range, resolve, year_range,
)

KeyFn = Callable[[Run], Optional[Hashable]]


# =============================================================================
# Filtering
# =============================================================================

def eligible_runs(runs: Iterable[Run], hotel_id: Optional[str] = None) -> List[Run]:
    """
    Runs that take part in analytics: submitted, and in the hotel's scope.

    Runs carrying no hotel_id were pre-filtered upstream and are kept.
    """
    return [
        run for run in runs
        if run.is_submitted and (hotel_id is None or run.hotel_id is None or run.hotel_id == hotel_id)
    ]


def runs_in_window(runs: Iterable[Run], window: TimeWindow) -> List[Run]:
    """Runs executed inside window. Runs without a timestamp never match."""
    return [run for run in runs if window.contains(run.executed_at)]


def filter_runs(
    runs: Iterable[Run],
    area_id: Optional[str] = None,
    template_id: Optional[str] = None,
    member_id: Optional[str] = None,
) -> List[Run]:
    return [
        run for run in runs
        if (area_id is None or run.area_id == area_id)
        and (template_id is None or run.template_id == template_id)
        and (member_id is None or run.member_id == member_id)
    ]


# =============================================================================
# Averages
# =============================================================================

def average_values(values: Iterable[Any]) -> ScoreAgg:
    """
    Average raw score values.

    Example:
        average_values([80, None, 'x', 120, 90]) -> ScoreAgg(avg=85.0, count=2)
    """
    scores = []
    rejected = 0
    for value in values:
        score = coerce_score(value)
        if score is None:
            if value is not None:
                rejected += 1
            continue
        scores.append(score)

    if rejected:
        log_normalized_records('run', 'score', rejected)

    if not scores:
        return EMPTY_SCORE
    return ScoreAgg(avg=round_score(sum(scores) / len(scores)), count=len(scores))


def average(runs: Iterable[Run]) -> ScoreAgg:
    """Average stored score of runs."""
    return average_values(run.score for run in runs)


def bucket_and_average(runs: Iterable[Run], predicate: Callable[[Run], bool]) -> ScoreAgg:
    """Average of the runs matching predicate."""
    return average(run for run in runs if predicate(run))


# =============================================================================
# Grouping
# =============================================================================

def by_area(run: Run) -> Optional[str]:
    return run.area_id


def by_template(run: Run) -> Optional[str]:
    return run.template_id


def by_member(run: Run) -> Optional[str]:
    return run.member_id


def by_month(run: Run) -> Optional[Tuple[int, int]]:
    """(year, 0-based month index)"""
    if run.executed_at is None:
        return None
    return run.executed_at.year, run.executed_at.month - 1


def by_quarter(run: Run) -> Optional[Tuple[int, int]]:
    """(year, quarter 1-4)"""
    if run.executed_at is None:
        return None
    return run.executed_at.year, quarter_of(run.executed_at.month - 1)


def by_year(run: Run) -> Optional[int]:
    if run.executed_at is None:
        return None
    return run.executed_at.year


def by_rolling_month(reference: datetime, months: int = 12) -> KeyFn:
    """
    Key factory for the rolling-month index: 0 is the oldest of the `months`
    calendar months ending at reference's month, months - 1 is reference's
    own month. Runs outside that span, or after reference, get None.
    """
    def _key(run: Run) -> Optional[int]:
        executed_at = run.executed_at
        if executed_at is None or executed_at > reference:
            return None
        back = (reference.year - executed_at.year) * 12 + (reference.month - executed_at.month)
        if back >= months:
            return None
        return months - 1 - back
    return _key


def group_runs(runs: Iterable[Run], key_fn: KeyFn) -> Dict[Hashable, List[Run]]:
    """
    Group runs by key_fn, first-seen key order. Runs whose key is None
    (no area, no timestamp, ...) belong to no group.
    """
    groups: Dict[Hashable, List[Run]] = {}
    for run in runs:
        key = key_fn(run)
        if key is None:
            continue
        groups.setdefault(key, []).append(run)
    return groups


def aggregate(
    runs: Iterable[Run],
    group_by_fns: Sequence[KeyFn],
    metric_fn: Callable[[List[Run]], Any] = average,
) -> Dict[Tuple, Any]:
    """
    Group runs by every key function at once and apply metric_fn per group.

    Args:
        runs: Already eligible runs
        group_by_fns: Key functions, e.g. [by_area, by_month]
        metric_fn: Reduction of one group, average() by default

    Returns:
        {(key_1, key_2, ...): metric} for every non-empty group

    Example:
        aggregate(runs, [by_area, by_year])
        -> {('a-1', 2024): ScoreAgg(avg=91.5, count=4), ...}
    """
    def composite(run: Run) -> Optional[Tuple]:
        keys = tuple(fn(run) for fn in group_by_fns)
        return None if any(key is None for key in keys) else keys

    return {key: metric_fn(group) for key, group in group_runs(runs, composite).items()}


# =============================================================================
# Calendar scores
# =============================================================================

def month_score(runs: Iterable[Run], year: int, month_index: int,
                template_id: Optional[str] = None, tz=None) -> ScoreAgg:
    """Average of one calendar month, optionally one template only."""
    window = month_range(year, month_index, tz)
    return average(runs_in_window(filter_runs(runs, template_id=template_id), window))


def quarter_score(runs: Iterable[Run], year: int, quarter: int,
                  template_id: Optional[str] = None, tz=None) -> ScoreAgg:
    """Average of one calendar quarter (1-4), optionally one template only."""
    window = quarter_range(year, quarter, tz)
    return average(runs_in_window(filter_runs(runs, template_id=template_id), window))


def year_score(runs: Iterable[Run], year: int,
               template_id: Optional[str] = None, tz=None) -> ScoreAgg:
    """Average of one calendar year, optionally one template only."""
    window = year_range(year, tz)
    return average(runs_in_window(filter_runs(runs, template_id=template_id), window))


def period_scores(runs: Iterable[Run], reference=None, tz=None) -> Dict[str, ScoreAgg]:
    """
    Gauge values: this month, this quarter and this year, each up to now.

    Returns:
        {'month': ScoreAgg, 'quarter': ScoreAgg, 'year': ScoreAgg}
    """
    runs = list(runs)
    return {
        'month': average(runs_in_window(runs, resolve(THIS_MONTH, reference, tz=tz))),
        'quarter': average(runs_in_window(runs, resolve(THIS_QUARTER, reference, tz=tz))),
        'year': average(runs_in_window(runs, resolve(THIS_YEAR, reference, tz=tz))),
    }
