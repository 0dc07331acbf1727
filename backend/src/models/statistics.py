"""
Hotel Audit Analytics - Statistics Result Models
Computed scores, aggregates, rankings and failure analytics.

Results are recomputed on every request and never persisted by the engine.
to_dict() returns plain primitives so any transport can serialize them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ScoreBreakdown:
    """PASS/FAIL/NA tally and 0-100 score of one run."""
    total: int
    fail_count: int
    na_count: int
    denom: int
    pass_count: int
    score: Optional[float]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "fail_count": self.fail_count,
            "na_count": self.na_count,
            "denom": self.denom,
            "pass_count": self.pass_count,
            "score": self.score,
        }


@dataclass(frozen=True)
class ScoreAgg:
    """
    Average of run scores.

    avg is None when count is 0: "no data" stays distinct from a real 0%.
    """
    avg: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {"avg": self.avg, "count": self.count}


EMPTY_SCORE = ScoreAgg(avg=None, count=0)


@dataclass(frozen=True)
class SectionScore:
    """Average per-run sub-score of every section sharing one name."""
    section_name: str
    avg_score: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {"section_name": self.section_name, "avg_score": self.avg_score, "count": self.count}


@dataclass(frozen=True)
class AreaScore:
    """Average score of one area over a window."""
    area_id: str
    area_name: str
    group: str
    avg: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {
            "area_id": self.area_id,
            "area_name": self.area_name,
            "group": self.group,
            "avg": self.avg,
            "count": self.count,
        }


@dataclass(frozen=True)
class WorstAudit:
    """Average score of one (area, template) pair."""
    area_id: str
    template_id: str
    area_name: str
    template_name: str
    avg: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {
            "area_id": self.area_id,
            "template_id": self.template_id,
            "area_name": self.area_name,
            "template_name": self.template_name,
            "avg": self.avg,
            "count": self.count,
        }


@dataclass(frozen=True)
class HeatCell:
    """One bucket of the heat matrix. Missing data is {value: None, count: 0}."""
    value: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {"value": self.value, "count": self.count}


@dataclass(frozen=True)
class HeatMapChild:
    """Per-template breakdown row nested under an entity row."""
    template_id: str
    label: str
    buckets: List[HeatCell]

    @property
    def summary(self) -> HeatCell:
        """Trailing full-span bucket."""
        return self.buckets[-1]

    def to_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "label": self.label,
            "buckets": [cell.to_dict() for cell in self.buckets],
        }


@dataclass(frozen=True)
class HeatMapRow:
    """
    One entity row of the heat matrix.

    buckets holds one cell per time bucket followed by the summary cell.
    """
    entity_id: str
    label: str
    group: str
    buckets: List[HeatCell]
    children: List[HeatMapChild] = field(default_factory=list)

    @property
    def summary(self) -> HeatCell:
        """Trailing full-span bucket."""
        return self.buckets[-1]

    def to_dict(self) -> dict:
        return {
            "entity_id": self.entity_id,
            "label": self.label,
            "group": self.group,
            "buckets": [cell.to_dict() for cell in self.buckets],
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class TrendPoint:
    """One calendar month of a short trend."""
    key: str
    year: int
    month_index: int
    avg: Optional[float]
    count: int

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "year": self.year,
            "month_index": self.month_index,
            "avg": self.avg,
            "count": self.count,
        }


@dataclass(frozen=True)
class MemberRankingRow:
    """Fail-rate ranking row for one staff member."""
    member_id: str
    name: str
    position: Optional[str]
    employee_number: Optional[str]
    audits_count: int
    answered: int
    fails: int
    fail_rate_pct: Optional[float]
    last_audit_at: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "name": self.name,
            "position": self.position,
            "employee_number": self.employee_number,
            "audits_count": self.audits_count,
            "answered": self.answered,
            "fails": self.fails,
            "fail_rate_pct": self.fail_rate_pct,
            "last_audit_at": _iso(self.last_audit_at),
        }


@dataclass(frozen=True)
class TopicFailure:
    """
    FAIL answers grouped under one topic.

    fail_count counts every FAIL, affected_count counts distinct executors.
    """
    topic_key: str
    topic: str
    fail_count: int
    affected_count: int
    example_text: Optional[str]
    question_id: Optional[str] = None
    tag: Optional[str] = None
    classification: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "topic_key": self.topic_key,
            "topic": self.topic,
            "fail_count": self.fail_count,
            "affected_count": self.affected_count,
            "example_text": self.example_text,
            "question_id": self.question_id,
            "tag": self.tag,
            "classification": self.classification,
        }


@dataclass(frozen=True)
class SharedTopicPair:
    """Two members who failed shared_count topics in common."""
    a_id: str
    a_name: str
    b_id: str
    b_name: str
    shared_count: int

    def to_dict(self) -> dict:
        return {
            "a_id": self.a_id,
            "a_name": self.a_name,
            "b_id": self.b_id,
            "b_name": self.b_name,
            "shared_count": self.shared_count,
        }


@dataclass(frozen=True)
class TemplateShare:
    """One template's share of a member's audits."""
    template_id: Optional[str]
    template_name: str
    audits_count: int
    audits_pct: float
    fail_pct: Optional[float]

    def to_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "template_name": self.template_name,
            "audits_count": self.audits_count,
            "audits_pct": self.audits_pct,
            "fail_pct": self.fail_pct,
        }


@dataclass(frozen=True)
class MemberTrendRow:
    """Answered/failed counts of one of a member's runs."""
    run_id: str
    executed_at: Optional[datetime]
    template_name: str
    answered: int
    fails: int
    fail_pct: Optional[float]

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "executed_at": _iso(self.executed_at),
            "template_name": self.template_name,
            "answered": self.answered,
            "fails": self.fails,
            "fail_pct": self.fail_pct,
        }


@dataclass(frozen=True)
class MemberReport:
    """Summary of one member's audits in a window."""
    audits_count: int
    overall_fail_pct: Optional[float]
    by_template: List[TemplateShare] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "audits_count": self.audits_count,
            "overall_fail_pct": self.overall_fail_pct,
            "by_template": [row.to_dict() for row in self.by_template],
        }
