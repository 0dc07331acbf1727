"""
Hotel Audit Analytics - Audit Snapshot
Immutable bundle of the already-fetched collections one computation needs.

The snapshot is built once per request by the data-access layer and
discarded afterwards; lookup maps are derived on demand, never cached
on the instance, so two computations never share mutable state.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .audit import Answer, Area, Member, Question, Run, Section, Template


@dataclass(frozen=True)
class AuditSnapshot:
    """Read-only snapshot of runs, answers and lookup tables."""
    runs: Tuple[Run, ...] = ()
    answers: Tuple[Answer, ...] = ()
    questions: Tuple[Question, ...] = ()
    sections: Tuple[Section, ...] = ()
    areas: Tuple[Area, ...] = ()
    templates: Tuple[Template, ...] = ()
    members: Tuple[Member, ...] = ()

    @property
    def questions_by_id(self) -> Dict[str, Question]:
        return {q.id: q for q in self.questions}

    @property
    def sections_by_id(self) -> Dict[str, Section]:
        return {s.id: s for s in self.sections}

    @property
    def areas_by_id(self) -> Dict[str, Area]:
        return {a.id: a for a in self.areas}

    @property
    def templates_by_id(self) -> Dict[str, Template]:
        return {t.id: t for t in self.templates}

    @property
    def members_by_id(self) -> Dict[str, Member]:
        return {m.id: m for m in self.members}

    @property
    def answers_by_run(self) -> Dict[str, List[Answer]]:
        return group_answers_by_run(self.answers)

    @property
    def member_by_run(self) -> Dict[str, str]:
        return member_by_run(self.runs)

    @classmethod
    def from_rows(
        cls,
        runs: Iterable = (),
        answers: Iterable = (),
        questions: Iterable = (),
        sections: Iterable = (),
        areas: Iterable = (),
        templates: Iterable = (),
        members: Iterable = (),
        tz=None,
    ) -> 'AuditSnapshot':
        """
        Build a snapshot from raw rows (dicts or row objects).

        Args:
            tz: Zone for naive run timestamps (defaults to HOTEL_TIMEZONE)
        """
        return cls(
            runs=tuple(Run.from_row(r, tz) for r in runs),
            answers=tuple(Answer.from_row(a) for a in answers),
            questions=tuple(Question.from_row(q) for q in questions),
            sections=tuple(Section.from_row(s) for s in sections),
            areas=tuple(Area.from_row(a) for a in areas),
            templates=tuple(Template.from_row(t) for t in templates),
            members=tuple(Member.from_row(m) for m in members),
        )


def group_answers_by_run(answers: Iterable[Answer]) -> Dict[str, List[Answer]]:
    """Answers keyed by run id, input order preserved."""
    by_run: Dict[str, List[Answer]] = {}
    for answer in answers:
        by_run.setdefault(answer.run_id, []).append(answer)
    return by_run


def member_by_run(runs: Iterable[Run]) -> Dict[str, str]:
    """Executor id of every run that has one."""
    return {run.id: run.member_id for run in runs if run.member_id}


def name_of(lookup: Dict, entity_id: Optional[str], fallback: str = '—') -> str:
    """Display name of an id in a *_by_id map, fallback when unresolved."""
    entity = lookup.get(entity_id) if entity_id is not None else None
    return entity.name if entity is not None else fallback
