"""
Area rankings for the hotel dashboard.

Areas (and area/template pairs) with no eligible runs are absent from
every ranking: no data is neither best nor worst.
"""
from typing import Iterable, List, Optional

from models import Area, AreaScore, Run, Template, WorstAudit, name_of
from utils.config import AREA_RANKING_SIZE

from analytics.aggregation.aggregator import aggregate, average, by_area, by_template, group_runs
from analytics.rankings.ranking import ASC, DESC, bottom_n, rank, top_n


def area_scores(runs: Iterable[Run], areas: Iterable[Area]) -> List[AreaScore]:
    """
    Average score per known area, areas without a scored run excluded.

    Returns:
        AreaScores in area order (sort_order, then name)
    """
    areas_by_id = {area.id: area for area in areas}
    grouped = group_runs(runs, by_area)

    ordered = sorted(
        (areas_by_id[area_id] for area_id in grouped if area_id in areas_by_id),
        key=lambda area: (area.sort_order is None, area.sort_order or 0, area.name),
    )

    scores = []
    for area in ordered:
        agg = average(grouped[area.id])
        if agg.count == 0:
            continue
        scores.append(AreaScore(area_id=area.id, area_name=area.name, group=area.group,
                                avg=agg.avg, count=agg.count))
    return scores


def top_areas(runs: Iterable[Run], areas: Iterable[Area], n: int = AREA_RANKING_SIZE) -> List[AreaScore]:
    """Best-scoring areas, highest average first."""
    return top_n(area_scores(runs, areas), n, key='avg', direction=DESC, tie_break='area_name')


def bottom_areas(runs: Iterable[Run], areas: Iterable[Area], n: int = AREA_RANKING_SIZE) -> List[AreaScore]:
    """Worst-scoring areas, lowest average first."""
    return bottom_n(area_scores(runs, areas), n, key='avg', tie_break='area_name')


def worst_audits(
    runs: Iterable[Run],
    areas: Iterable[Area],
    templates: Iterable[Template],
    n: int = AREA_RANKING_SIZE,
) -> List[WorstAudit]:
    """
    Lowest-scoring (area, template) pairs.

    Pairs without a scored run or without a resolvable area are dropped.

    Returns:
        Up to n WorstAudits, lowest average first
    """
    areas_by_id = {area.id: area for area in areas}
    templates_by_id = {template.id: template for template in templates}

    rows = []
    for (area_id, template_id), agg in aggregate(runs, [by_area, by_template]).items():
        area: Optional[Area] = areas_by_id.get(area_id)
        if agg.count == 0 or area is None:
            continue
        rows.append(WorstAudit(
            area_id=area_id,
            template_id=template_id,
            area_name=area.name,
            template_name=name_of(templates_by_id, template_id, 'Audit'),
            avg=agg.avg,
            count=agg.count,
        ))

    ranked = rank(rows, 'avg', ASC, tie_break=lambda row: (row.area_name, row.template_name))
    return top_n(ranked, n)
