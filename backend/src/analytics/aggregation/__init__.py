"""
Aggregation - grouped and windowed averages of run scores.

Files:
- aggregator.py: eligibility filters, average(), grouping keys, calendar scores
- sections.py: per-run section sub-scores and rollups by section name
"""

from .aggregator import (
    eligible_runs, runs_in_window, filter_runs,
    average, average_values, bucket_and_average,
    by_area, by_template, by_member, by_month, by_quarter, by_year, by_rolling_month,
    group_runs, aggregate,
    month_score, quarter_score, year_score, period_scores,
)
from .sections import (
    section_question_totals, run_section_exceptions, per_run_section_scores,
    rollup_by_section_name, worst_section, best_section,
)

__all__ = [
    "eligible_runs",
    "runs_in_window",
    "filter_runs",
    "average",
    "average_values",
    "bucket_and_average",
    "by_area",
    "by_template",
    "by_member",
    "by_month",
    "by_quarter",
    "by_year",
    "by_rolling_month",
    "group_runs",
    "aggregate",
    "month_score",
    "quarter_score",
    "year_score",
    "period_scores",
    "section_question_totals",
    "run_section_exceptions",
    "per_run_section_scores",
    "rollup_by_section_name",
    "worst_section",
    "best_section",
]
