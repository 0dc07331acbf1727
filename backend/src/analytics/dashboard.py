"""
Hotel Audit Analytics - Dashboard Service
Composes the engine operations into the hotel, area, people and member views.

Every view is recomputed from the snapshot on each call; nothing is cached
between calls, so superseded computations can simply be discarded.
The hotel scope is always explicit: it is a constructor argument, never
ambient state.
"""

import time
from typing import Any, Dict, List, Optional

from models import AuditSnapshot, Run, member_by_run
from utils.config import (
    AREA_DASHBOARD_WINDOW_RUNS, AREA_TOP_STANDARDS_N, AREA_TREND_RUNS,
    COMMON_FAILURES_TOP_N, SHARED_TOPICS_TOP_N,
)
from utils.heatmap_helpers import transform_matrix_to_heatmap, validate_heatmap_period
from utils.logger import log_computation_complete, log_computation_start
from utils.metrics import clamp_score, coerce_score
from utils.timezone import get_hotel_timezone

from analytics.aggregation import (
    average, eligible_runs, filter_runs, period_scores, rollup_by_section_name,
    runs_in_window, worst_section, best_section,
)
from analytics.errors import invalid_argument
from analytics.failures import (
    CLASSIFICATION, QUESTION, analyze_failures, answers_for_runs, by_fail_count,
    common_failures, shared_topic_pairs,
)
from analytics.members import member_report, member_top_standards, member_trend
from analytics.periods import (
    AREA_DASHBOARD_DEFAULT_PERIOD, PEOPLE_DEFAULT_PERIOD, ROLLING_12M, THIS_MONTH, THIS_YEAR,
    period_label, reference_instant, resolve, safe_period,
)
from analytics.rankings import SortState, bottom_areas, member_ranking, top_areas, worst_audits
from analytics.trends import ROLLING, BucketSpec, build_matrix, short_trend


def _newest_first(runs: List[Run]) -> List[Run]:
    return sorted(runs, key=lambda run: run.executed_at.timestamp() if run.executed_at else 0.0, reverse=True)


class DashboardService:
    """
    Builds dashboard payloads for one hotel.

    Usage:
        service = DashboardService(snapshot, hotel_id='h-1')
        payload = service.hotel_dashboard()
    """

    def __init__(self, snapshot: AuditSnapshot, hotel_id: str, now: Any = None, tz=None):
        """
        Args:
            snapshot: Already-fetched rows, pre-filtered to the caller's scope
            hotel_id: Tenant scope; runs tagged with another hotel are ignored
            now: Reference instant for every relative period (default: current time)
            tz: Zone for calendar boundaries (default: HOTEL_TIMEZONE)

        Raises:
            InvalidArgumentError: If hotel_id is empty or now is malformed
        """
        if not hotel_id:
            raise invalid_argument('hotel_id', hotel_id, "hotel scope is required")
        self.snapshot = snapshot
        self.hotel_id = str(hotel_id)
        self.tz = tz or get_hotel_timezone()
        self.now = reference_instant(now, self.tz)
        self.runs = eligible_runs(snapshot.runs, self.hotel_id)

    def _window_runs(self, period, default, custom_from=None, custom_to=None):
        key = safe_period(period, default)
        window = resolve(key, self.now, custom_from, custom_to, tz=self.tz)
        return key, window, runs_in_window(self.runs, window)

    # =========================================================================
    # Hotel dashboard
    # =========================================================================

    def hotel_dashboard(self, heatmap_period: str = ROLLING_12M, summary: str = ROLLING) -> Dict[str, Any]:
        """
        Gauges, area heat matrix, top/bottom areas and worst audits.

        Args:
            heatmap_period: ROLLING_12M (12 rolling months) or THIS_YEAR
                            (Jan..Dec of the current year)
            summary: Trailing column of the rolling matrix, ROLLING or YTD
        """
        if not validate_heatmap_period(heatmap_period):
            raise invalid_argument('heatmap_period', heatmap_period, "must be ROLLING_12M or THIS_YEAR")

        start_time = time.time()
        log_computation_start('hotel_dashboard', self.hotel_id, len(self.runs))

        snapshot = self.snapshot
        if heatmap_period == ROLLING_12M:
            spec = BucketSpec.rolling(self.now, summary=summary, tz=self.tz)
        else:
            spec = BucketSpec.calendar_year(self.now.year, self.tz)
        rows = build_matrix(snapshot.areas, self.runs, spec, snapshot.templates, with_children=True)

        _, _, year_runs = self._window_runs(THIS_YEAR, THIS_YEAR)
        _, _, month_runs = self._window_runs(THIS_MONTH, THIS_MONTH)

        top = top_areas(year_runs, snapshot.areas)
        bottom = bottom_areas(year_runs, snapshot.areas)
        worst = worst_audits(month_runs, snapshot.areas, snapshot.templates)

        area_trends = {
            area.id: [point.to_dict() for point in short_trend(filter_runs(self.runs, area_id=area.id), self.now, tz=self.tz)]
            for area in snapshot.areas
        }

        gauges = period_scores(self.runs, self.now, self.tz)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        log_computation_complete('hotel_dashboard', self.hotel_id, duration_ms,
                                 areas=len(rows), top_areas=len(top), worst_audits=len(worst))

        return {
            "hotel_id": self.hotel_id,
            "generated_at": self.now.isoformat(),
            "gauges": {name: agg.to_dict() for name, agg in gauges.items()},
            "heatmap": transform_matrix_to_heatmap(rows, spec.labels, heatmap_period),
            "rows": [row.to_dict() for row in rows],
            "top_areas": [row.to_dict() for row in top],
            "bottom_areas": [row.to_dict() for row in bottom],
            "worst_audits": [row.to_dict() for row in worst],
            "area_trends": area_trends,
        }

    # =========================================================================
    # Area dashboard
    # =========================================================================

    def area_dashboard(
        self,
        area_id: str,
        period: Optional[str] = None,
        template_id: Optional[str] = None,
        custom_from: Any = None,
        custom_to: Any = None,
    ) -> Dict[str, Any]:
        """
        Latest-runs average, last run, score sparkline, section ranking and
        top failing standards/classifications of one area.

        Unknown period selectors fall back to THIS_MONTH.
        """
        snapshot = self.snapshot
        area = snapshot.areas_by_id.get(str(area_id))
        if area is None:
            raise invalid_argument('area_id', area_id, "unknown area")

        start_time = time.time()
        key, window, period_runs = self._window_runs(period, AREA_DASHBOARD_DEFAULT_PERIOD, custom_from, custom_to)
        runs = [
            run for run in filter_runs(period_runs, area_id=area.id, template_id=template_id)
            if coerce_score(run.score) is not None
        ]
        log_computation_start('area_dashboard', self.hotel_id, len(runs))

        ordered = _newest_first(runs)
        latest = ordered[:AREA_DASHBOARD_WINDOW_RUNS]
        window_avg = average(latest)
        last_run = ordered[0] if ordered else None
        trend = [clamp_score(run.score) for run in reversed(ordered[:AREA_TREND_RUNS])]

        answers_by_run = snapshot.answers_by_run
        sections = rollup_by_section_name(latest, answers_by_run, snapshot.sections, snapshot.questions)

        questions_by_id = snapshot.questions_by_id
        answers = answers_for_runs(runs, answers_by_run)
        executors = member_by_run(runs)
        standards = by_fail_count(analyze_failures(answers, questions_by_id, executors, QUESTION), AREA_TOP_STANDARDS_N)
        classifications = by_fail_count(
            analyze_failures(answers, questions_by_id, executors, CLASSIFICATION), AREA_TOP_STANDARDS_N)

        worst = worst_section(sections)
        best = best_section(sections)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        log_computation_complete('area_dashboard', self.hotel_id, duration_ms,
                                 runs=len(runs), sections=len(sections), standards=len(standards))

        return {
            "hotel_id": self.hotel_id,
            "area": area.to_dict(),
            "period": key,
            "period_label": period_label(key),
            "window": window.to_dict(),
            "window_avg": window_avg.to_dict(),
            "last_run": {
                "run_id": last_run.id,
                "score": clamp_score(last_run.score),
                "executed_at": last_run.executed_at.isoformat() if last_run.executed_at else None,
            } if last_run else None,
            "trend": trend,
            "sections": [row.to_dict() for row in sections],
            "worst_section": worst.to_dict() if worst else None,
            "best_section": best.to_dict() if best else None,
            "top_standards": [row.to_dict() for row in standards],
            "top_classifications": [row.to_dict() for row in classifications],
        }

    # =========================================================================
    # People analytics
    # =========================================================================

    def people_analytics(
        self,
        period: Optional[str] = None,
        template_id: Optional[str] = None,
        custom_from: Any = None,
        custom_to: Any = None,
        sort_state: Optional[SortState] = None,
    ) -> Dict[str, Any]:
        """
        Member fail-rate ranking, common failures and shared-topic pairs.

        Unknown period selectors fall back to the last 30 days.
        """
        start_time = time.time()
        key, window, period_runs = self._window_runs(period, PEOPLE_DEFAULT_PERIOD, custom_from, custom_to)
        runs = filter_runs(period_runs, template_id=template_id)
        log_computation_start('people_analytics', self.hotel_id, len(runs))

        snapshot = self.snapshot
        sort_state = sort_state or SortState()
        answers_by_run = snapshot.answers_by_run
        ranking = member_ranking(runs, answers_by_run, snapshot.members, sort_state=sort_state)

        answers = answers_for_runs(runs, answers_by_run)
        executors = member_by_run(runs)
        questions_by_id = snapshot.questions_by_id
        failures = common_failures(answers, questions_by_id, executors, n=COMMON_FAILURES_TOP_N)
        pairs = shared_topic_pairs(answers, questions_by_id, executors, snapshot.members_by_id,
                                   n=SHARED_TOPICS_TOP_N)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        log_computation_complete('people_analytics', self.hotel_id, duration_ms,
                                 members=len(ranking), topics=len(failures.by_fails), pairs=len(pairs))

        return {
            "hotel_id": self.hotel_id,
            "period": key,
            "period_label": period_label(key),
            "window": window.to_dict(),
            "sort": {"key": sort_state.key, "direction": sort_state.direction},
            "ranking": [row.to_dict() for row in ranking],
            "common_failures": failures.to_dict(),
            "shared_topics": [pair.to_dict() for pair in pairs],
        }

    # =========================================================================
    # Member report
    # =========================================================================

    def member_report(
        self,
        member_id: str,
        period: Optional[str] = None,
        template_id: Optional[str] = None,
        custom_from: Any = None,
        custom_to: Any = None,
    ) -> Dict[str, Any]:
        """
        One member's summary, per-run trend and most-failed standards.

        Unknown period selectors fall back to the last 30 days.
        """
        if not member_id:
            raise invalid_argument('member_id', member_id, "member is required")
        member_id = str(member_id)

        start_time = time.time()
        key, window, runs = self._window_runs(period, PEOPLE_DEFAULT_PERIOD, custom_from, custom_to)
        log_computation_start('member_report', self.hotel_id, len(runs))

        snapshot = self.snapshot
        answers_by_run = snapshot.answers_by_run
        report = member_report(runs, answers_by_run, snapshot.templates, member_id, template_id)
        trend = member_trend(runs, answers_by_run, snapshot.templates, member_id, template_id)
        standards = member_top_standards(runs, answers_by_run, snapshot.questions_by_id, member_id, template_id)

        member = snapshot.members_by_id.get(member_id)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        log_computation_complete('member_report', self.hotel_id, duration_ms,
                                 audits=report.audits_count, standards=len(standards))

        return {
            "hotel_id": self.hotel_id,
            "member": member.to_dict() if member else {"id": member_id, "name": '—'},
            "period": key,
            "period_label": period_label(key),
            "window": window.to_dict(),
            "report": report.to_dict(),
            "trend": [row.to_dict() for row in trend],
            "top_standards": [row.to_dict() for row in standards],
        }
