"""
Rankings
========

Files:
- ranking.py: rank(), top_n(), bottom_n(), SortState and the sort key registry
- area_rankings.py: top/bottom areas and worst (area, template) audits
- member_rankings.py: member fail-rate table
"""

from .ranking import (
    ASC, DESC, SORT_KEYS, SortKey, SortState,
    bottom_n, collation_key, rank, top_n,
)
from .area_rankings import area_scores, bottom_areas, top_areas, worst_audits
from .member_rankings import member_ranking

__all__ = [
    "ASC",
    "DESC",
    "SORT_KEYS",
    "SortKey",
    "SortState",
    "bottom_n",
    "collation_key",
    "rank",
    "top_n",
    "area_scores",
    "bottom_areas",
    "top_areas",
    "worst_audits",
    "member_ranking",
]
