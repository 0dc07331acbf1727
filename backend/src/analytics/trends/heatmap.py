"""
Trend / Heat-Matrix Builder.

Builds entity x month matrices of average scores. Every row carries one
cell per month followed by one trailing summary cell over the whole span.
An empty bucket is HeatCell(value=None, count=0), never 0.

Bucket specs:
    BucketSpec.rolling(now)          12 rolling months ending this month,
                                     summary = whole 12-month span
                                     (or year-to-date with summary=YTD)
    BucketSpec.calendar_year(2024)   Jan..Dec 2024, summary = the year
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from models import Area, HeatCell, HeatMapChild, HeatMapRow, Run, Template, TrendPoint
from utils.timezone import get_hotel_timezone, start_of_year

from analytics.aggregation.aggregator import average, by_area, by_template, group_runs, runs_in_window
from analytics.errors import invalid_argument
from analytics.periods import (
    ROLLING_MONTHS, MonthWindow, TimeWindow,
    rolling_month_windows, year_month_windows, year_range,
)
from analytics.rankings.ranking import collation_key

ROLLING = 'ROLLING'
YTD = 'YTD'

SHORT_TREND_MONTHS = 3


@dataclass(frozen=True)
class BucketSpec:
    """Month buckets of a matrix plus the summary window."""
    months: Tuple[MonthWindow, ...]
    summary: TimeWindow
    summary_label: str

    @classmethod
    def rolling(cls, reference: Any = None, months: int = ROLLING_MONTHS,
                summary: str = ROLLING, tz=None) -> 'BucketSpec':
        windows = tuple(rolling_month_windows(reference, months, tz))
        last = windows[-1].window
        if summary == ROLLING:
            span = TimeWindow(windows[0].window.start, last.end, end_inclusive=False)
            label = f"{months}M"
        elif summary == YTD:
            tz = last.start.tzinfo or get_hotel_timezone()
            span = TimeWindow(start_of_year(windows[-1].year, tz), last.end, end_inclusive=False)
            label = str(windows[-1].year)
        else:
            raise invalid_argument('summary', summary, "must be 'ROLLING' or 'YTD'")
        return cls(months=windows, summary=span, summary_label=label)

    @classmethod
    def calendar_year(cls, year: int, tz=None) -> 'BucketSpec':
        return cls(months=tuple(year_month_windows(year, tz)), summary=year_range(year, tz),
                   summary_label=str(year))

    @property
    def labels(self) -> List[str]:
        return [month.label for month in self.months] + [self.summary_label]


def bucket_labels(spec: BucketSpec) -> List[str]:
    """Column headers: one per month then the summary column."""
    return spec.labels


def _cell(runs: Sequence[Run], window) -> HeatCell:
    agg = average(runs_in_window(runs, window))
    return HeatCell(value=agg.avg, count=agg.count)


def build_buckets(runs: Sequence[Run], spec: BucketSpec) -> List[HeatCell]:
    """Month cells followed by the summary cell."""
    cells = [_cell(runs, month) for month in spec.months]
    cells.append(_cell(runs, spec.summary))
    return cells


def _summary_sort_key(child: HeatMapChild):
    value = child.summary.value
    return (value is None, value if value is not None else 0.0, collation_key(child.label))


def build_matrix(
    entities: Iterable[Area],
    runs: Iterable[Run],
    spec: BucketSpec,
    templates: Optional[Iterable[Template]] = None,
    with_children: bool = False,
) -> List[HeatMapRow]:
    """
    One row per entity (area), sorted by group then name.

    Args:
        entities: Areas to show; an area with no runs still gets a row
        runs: Eligible runs
        spec: Month buckets and summary window
        templates: Template lookup for child labels
        with_children: Nest one row per template found in the area's runs;
                       children with no data anywhere are dropped, the rest
                       are sorted worst summary first

    Returns:
        HeatMapRows
    """
    runs_by_area = group_runs(runs, by_area)
    templates_by_id = {template.id: template for template in (templates or [])}

    rows = []
    for area in entities:
        area_runs = runs_by_area.get(area.id, [])
        children: List[HeatMapChild] = []
        if with_children:
            for template_id, template_runs in group_runs(area_runs, by_template).items():
                buckets = build_buckets(template_runs, spec)
                if all(cell.count == 0 for cell in buckets):
                    continue
                template = templates_by_id.get(template_id)
                children.append(HeatMapChild(
                    template_id=template_id,
                    label=template.name if template else 'Audit',
                    buckets=buckets,
                ))
            children.sort(key=_summary_sort_key)

        rows.append(HeatMapRow(
            entity_id=area.id,
            label=area.name,
            group=area.group,
            buckets=build_buckets(area_runs, spec),
            children=children,
        ))

    rows.sort(key=lambda row: (collation_key(row.group), collation_key(row.label)))
    return rows


def short_trend(runs: Iterable[Run], reference: Any = None,
                months: int = SHORT_TREND_MONTHS, tz=None) -> List[TrendPoint]:
    """Average per month over the most recent months, newest last."""
    runs = list(runs)
    points = []
    for month in rolling_month_windows(reference, months, tz):
        agg = average(runs_in_window(runs, month))
        points.append(TrendPoint(key=month.key, year=month.year, month_index=month.month_index,
                                 avg=agg.avg, count=agg.count))
    return points
