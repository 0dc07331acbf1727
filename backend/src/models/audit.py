"""
Hotel Audit Analytics - Audit Entity Models
Read-only records handed to the engine by the data-access layer.

Rows arrive from the hosted backend as loosely shaped dicts (or row objects)
whose column names differ between tables and app versions
(audit_run_id vs run_id, team_member_id vs member_id, ...). from_row()
resolves those aliases once so the engine only ever sees typed fields.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from utils.timezone import parse_timestamp

PASS = 'PASS'
FAIL = 'FAIL'
NA = 'NA'
ANSWER_VALUES = (PASS, FAIL, NA)

STATUS_SUBMITTED = 'submitted'


def _field(row: Any, *names: str, default: Any = None) -> Any:
    """Read the first present, non-None column among names from a dict or row object."""
    for name in names:
        if isinstance(row, dict):
            value = row.get(name)
        else:
            value = getattr(row, name, None)
        if value is not None:
            return value
    return default


def _id(value: Any) -> Optional[str]:
    """Ids are compared across tables, so they are always strings."""
    return None if value is None else str(value)


def _int(value: Any) -> Optional[int]:
    """Integer column value, None when it does not parse."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _text(value: Any) -> Optional[str]:
    """Stripped string or None for blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_answer_value(value: Any) -> Optional[str]:
    """
    Normalize a stored answer value to PASS, FAIL, NA or None.

    Matching is case-insensitive ('fail' == 'FAIL'). Any other value is
    treated as absent rather than rejected.
    """
    if not isinstance(value, str):
        return None
    upper = value.strip().upper()
    return upper if upper in ANSWER_VALUES else None


def resolve_answer_value(result: Any = None, answer: Any = None) -> Optional[str]:
    """
    Resolve the effective value of an answer row.

    The reviewed `result` column wins over the raw `answer` column whenever it
    is set (result ?? answer, never the reverse). An unreadable `result` makes
    the value absent; it does not reopen the raw answer.
    """
    if result is not None:
        return normalize_answer_value(result)
    return normalize_answer_value(answer)


def value_or_default_pass(value: Optional[str]) -> str:
    """
    Effective value of a question when scoring a run.

    A question with no recorded (or an unreadable) answer counts as PASS,
    matching the "seed every question as PASS" policy used at data entry.
    """
    return value if value in ANSWER_VALUES else PASS


@dataclass(frozen=True)
class Question:
    """One checklist item."""
    id: str
    text: str
    section_id: Optional[str] = None
    tag: Optional[str] = None
    classification: Optional[str] = None
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "section_id": self.section_id,
            "tag": self.tag,
            "classification": self.classification,
            "active": self.active,
        }

    @classmethod
    def from_row(cls, row) -> 'Question':
        return cls(
            id=str(_field(row, 'id', 'question_id')),
            text=_text(_field(row, 'text')) or '',
            section_id=_id(_field(row, 'section_id', 'audit_section_id')),
            tag=_text(_field(row, 'tag')),
            classification=_text(_field(row, 'classification')),
            active=_field(row, 'active', default=True) is not False,
        )


@dataclass(frozen=True)
class Section:
    """A named grouping of questions within a template (e.g. "Safety")."""
    id: str
    name: str
    template_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "template_id": self.template_id}

    @classmethod
    def from_row(cls, row) -> 'Section':
        return cls(
            id=str(_field(row, 'id', 'section_id')),
            name=_text(_field(row, 'name')) or 'Unsectioned',
            template_id=_id(_field(row, 'template_id', 'audit_template_id')),
        )


@dataclass(frozen=True)
class Answer:
    """
    One response to a question within one run.

    Attributes:
        value: Resolved PASS/FAIL/NA, or None when the stored value is absent
               or not one of the three
    """
    run_id: str
    question_id: str
    value: Optional[str] = None

    def to_dict(self) -> dict:
        return {"run_id": self.run_id, "question_id": self.question_id, "value": self.value}

    @classmethod
    def from_row(cls, row) -> 'Answer':
        """
        Build from an answer row holding `result` and/or `answer` columns,
        or an already resolved `value`.
        """
        if _field(row, 'result', 'answer') is None:
            value = normalize_answer_value(_field(row, 'value'))
        else:
            value = resolve_answer_value(_field(row, 'result'), _field(row, 'answer'))
        return cls(
            run_id=str(_field(row, 'run_id', 'audit_run_id')),
            question_id=str(_field(row, 'question_id')),
            value=value,
        )


@dataclass(frozen=True)
class Run:
    """
    One audit execution.

    Attributes:
        score: Stored 0-100 score as persisted upstream (may be None or
               anomalous, read it through utils.metrics.coerce_score)
        executed_at: Aware datetime, or None if the stored value was unreadable
    """
    id: str
    area_id: str
    template_id: Optional[str] = None
    member_id: Optional[str] = None
    executed_at: Optional[datetime] = None
    status: Optional[str] = None
    score: Any = None
    hotel_id: Optional[str] = None

    @property
    def is_submitted(self) -> bool:
        """Only submitted runs are analytics-eligible."""
        return (self.status or '').strip().lower() == STATUS_SUBMITTED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "area_id": self.area_id,
            "template_id": self.template_id,
            "member_id": self.member_id,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "status": self.status,
            "score": self.score,
            "hotel_id": self.hotel_id,
        }

    @classmethod
    def from_row(cls, row, tz=None) -> 'Run':
        """
        Create Run instance from a database row.

        Args:
            row: Dict or row object from audit_runs
            tz: Zone for naive timestamps (defaults to HOTEL_TIMEZONE)
        """
        return cls(
            id=str(_field(row, 'id', 'run_id')),
            area_id=_id(_field(row, 'area_id')),
            template_id=_id(_field(row, 'template_id', 'audit_template_id')),
            member_id=_id(_field(row, 'member_id', 'team_member_id')),
            executed_at=parse_timestamp(_field(row, 'executed_at'), tz),
            status=_field(row, 'status'),
            score=_field(row, 'score'),
            hotel_id=_id(_field(row, 'hotel_id')),
        )


@dataclass(frozen=True)
class Area:
    """An operational department (Housekeeping, Front Office, ...)."""
    id: str
    name: str
    type: Optional[str] = None
    sort_order: Optional[int] = None

    @property
    def group(self) -> str:
        """Category label used to group rows, 'Uncategorized' when unset."""
        return self.type or 'Uncategorized'

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "type": self.type, "sort_order": self.sort_order}

    @classmethod
    def from_row(cls, row) -> 'Area':
        return cls(
            id=str(_field(row, 'id', 'area_id')),
            name=_text(_field(row, 'name')) or '—',
            type=_text(_field(row, 'type')),
            sort_order=_int(_field(row, 'sort_order')),
        )


@dataclass(frozen=True)
class Template:
    """
    A checklist definition tied to one area.

    Inactive templates drop out of "available" listings only; historical
    runs against them stay analytics-eligible.
    """
    id: str
    name: str
    area_id: Optional[str] = None
    active: bool = True

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "area_id": self.area_id, "active": self.active}

    @classmethod
    def from_row(cls, row) -> 'Template':
        return cls(
            id=str(_field(row, 'id', 'template_id')),
            name=_text(_field(row, 'name')) or 'Audit',
            area_id=_id(_field(row, 'area_id')),
            active=_field(row, 'active', default=True) is not False,
        )


@dataclass(frozen=True)
class Member:
    """A staff person who executes runs."""
    id: str
    name: str
    position: Optional[str] = None
    employee_number: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "employee_number": self.employee_number,
        }

    @classmethod
    def from_row(cls, row) -> 'Member':
        return cls(
            id=str(_field(row, 'id', 'member_id', 'team_member_id')),
            name=_text(_field(row, 'name', 'full_name')) or '—',
            position=_text(_field(row, 'position')),
            employee_number=_text(_field(row, 'employee_number')),
        )
