"""
Heatmap Transformation Utilities
=================================

Helpers for transforming heat-matrix rows into the payload the dashboard
heatmap renders.

The matrix rows come from analytics.trends.heatmap.build_matrix(); this
module only reshapes them, it never recomputes an average.
"""

from typing import Any, Dict, List, Optional, Sequence

from .config import HOTEL_TIMEZONE

# Heatmaps need several time buckets; the short periods have one
HEATMAP_PERIODS = ('ROLLING_12M', 'THIS_YEAR')


def _values(buckets) -> List[Optional[float]]:
    return [cell.value for cell in buckets]


def transform_matrix_to_heatmap(
    rows: Sequence[Any],
    time_labels: Sequence[str],
    period: str,
    title: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Transform heat-matrix rows to heatmap payload format.

    Args:
        rows: HeatMapRows, each with one cell per month then a summary cell
        time_labels: Column labels from bucket_labels(), summary label last
        period: Period identifier (ROLLING_12M or THIS_YEAR)
        title: Optional override for the generated title

    Returns:
        Heatmap format data:
        {
          "period": "ROLLING_12M",
          "title": "Area Scores (Last 12 Months)",
          "timezone": "Europe/Madrid",
          "entities": [
            {
              "entity_id": "a-1",
              "entity_name": "Housekeeping",
              "group": "Rooms",
              "rank": 1,
              "total_value": 91.25,
              "total_count": 12,
              "children": [
                {"template_id": "t-1", "label": "Room check", "values": [...], "total_value": 88.0}
              ]
            }
          ],
          "time_labels": ["Apr 2023", ..., "Mar 2024"],
          "summary_label": "12M",
          "matrix": [
            [92.5, None, 88.0, ...],   # Housekeeping
            [75.0, 81.2, None, ...]    # Front Office
          ]
        }

    Note:
        - Missing values (None) are preserved in the matrix, never turned into 0.
        - Rank follows row order (group, then name), as rendered.
    """
    matrix = []
    entities = []
    for idx, row in enumerate(rows):
        values = _values(row.buckets)
        matrix.append(values[:-1])

        entity = {
            "entity_id": row.entity_id,
            "entity_name": row.label,
            "group": row.group,
            "rank": idx + 1,
            "total_value": row.summary.value,
            "total_count": row.summary.count,
        }

        if row.children:
            entity["children"] = [
                {
                    "template_id": child.template_id,
                    "label": child.label,
                    "values": _values(child.buckets)[:-1],
                    "total_value": child.summary.value,
                }
                for child in row.children
            ]

        entities.append(entity)

    labels = list(time_labels)
    period_display = "Last 12 Months" if period == 'ROLLING_12M' else "This Year"
    return {
        "period": period,
        "title": title or f"Area Scores ({period_display})",
        "timezone": HOTEL_TIMEZONE,
        "entities": entities,
        "time_labels": labels[:-1],
        "summary_label": labels[-1] if labels else None,
        "matrix": matrix
    }


def validate_heatmap_period(period: str) -> bool:
    """
    Validate that the period is supported for heatmaps.

    Heatmaps are not available for single-month or day-count periods
    because they need month-by-month buckets.

    Args:
        period: Period identifier to validate

    Returns:
        True if period is valid for heatmaps, False otherwise
    """
    return period in HEATMAP_PERIODS
