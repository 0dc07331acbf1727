"""
Hotel Audit Analytics - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Record factories (runs, answers, questions)
- A small hotel snapshot with known scores, used by the dashboard tests

Sample hotel (reference instant 2024-03-15 12:00 UTC):

    Areas:      a-1 Housekeeping (Rooms), a-2 Front Office (Front Office),
                a-3 Spa (no type, never audited)
    Templates:  t-1 Room inspection (a-1), t-2 Front desk check (a-2)
    Members:    m-1 Ana, m-2 Bruno, m-3 Carla

    run  area template member executed_at        status     score  notes
    r-1  a-1  t-1      m-1    2024-03-10 09:00   submitted  75
    r-2  a-1  t-1      m-2    2024-03-05 09:00   submitted  50
    r-3  a-2  t-2      m-1    2024-03-12 09:00   submitted  100
    r-4  a-2  t-2      m-2    2024-02-20 09:00   submitted  50
    r-5  a-1  t-1      m-3    2024-01-15 09:00   submitted  75
    r-6  a-1  t-1      m-1    2024-03-14 09:00   draft      0      not eligible
    r-7  a-2  t-2      m-1    2023-12-01 09:00   submitted  80     last year
    r-8  a-1  t-1      m-1    2024-03-11 09:00   submitted  10     hotel h-2
"""

import pytest
from datetime import datetime
from zoneinfo import ZoneInfo

from models import Answer, AuditSnapshot, Question, Run

UTC = ZoneInfo('UTC')

REFERENCE_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


# ============================================================================
# Record Factories
# ============================================================================

@pytest.fixture
def make_run():
    """
    Factory for submitted runs.

    Returns:
        Callable building a Run; executed_at takes (year, month, day) or a datetime
    """
    def _make_run(run_id, score=None, area_id='a-1', template_id='t-1', member_id='m-1',
                  executed_at=(2024, 3, 10), status='submitted', hotel_id=None):
        if isinstance(executed_at, tuple):
            executed_at = datetime(*executed_at, 9, 0, tzinfo=UTC)
        return Run(id=run_id, area_id=area_id, template_id=template_id, member_id=member_id,
                   executed_at=executed_at, status=status, score=score, hotel_id=hotel_id)
    return _make_run


@pytest.fixture
def make_answers():
    """
    Factory for one run's answers.

    Returns:
        Callable taking run_id and {question_id: value}
    """
    def _make_answers(run_id, values):
        return [Answer(run_id=run_id, question_id=qid, value=value) for qid, value in values.items()]
    return _make_answers


@pytest.fixture
def ten_questions():
    """Ten active questions of one template, plus one inactive question."""
    questions = [Question(id=f"q-{i}", text=f"Standard {i}", section_id='s-1') for i in range(1, 11)]
    questions.append(Question(id='q-old', text='Retired standard', section_id='s-1', active=False))
    return questions


# ============================================================================
# Sample Hotel Snapshot
# ============================================================================

@pytest.fixture
def reference_now():
    return REFERENCE_NOW


@pytest.fixture
def sample_rows():
    """
    Raw rows as the data-access layer hands them over (mixed column names).

    Returns:
        Dict of row lists keyed by table
    """
    return {
        'areas': [
            {'id': 'a-1', 'name': 'Housekeeping', 'type': 'Rooms', 'sort_order': 1},
            {'id': 'a-2', 'name': 'Front Office', 'type': 'Front Office', 'sort_order': 2},
            {'id': 'a-3', 'name': 'Spa', 'type': None, 'sort_order': 3},
        ],
        'templates': [
            {'id': 't-1', 'name': 'Room inspection', 'area_id': 'a-1', 'active': True},
            {'id': 't-2', 'name': 'Front desk check', 'area_id': 'a-2', 'active': False},
        ],
        'sections': [
            {'id': 's-1', 'name': 'Safety', 'template_id': 't-1'},
            {'id': 's-2', 'name': 'Cleanliness', 'template_id': 't-1'},
            {'id': 's-3', 'name': 'Safety', 'audit_template_id': 't-2'},
        ],
        'questions': [
            {'id': 'q-1', 'text': 'Fire exits clear', 'section_id': 's-1',
             'tag': 'Fire exits', 'classification': 'Safety'},
            {'id': 'q-2', 'text': 'Smoke detector tested', 'section_id': 's-1',
             'classification': 'Safety'},
            {'id': 'q-3', 'text': 'Bins emptied', 'section_id': 's-2'},
            {'id': 'q-4', 'text': 'Towels folded', 'section_id': 's-2',
             'tag': 'Towels', 'classification': 'Linen'},
            {'id': 'q-5', 'text': 'Desk tidy', 'audit_section_id': 's-3', 'classification': 'Safety'},
            {'id': 'q-6', 'text': 'Brochures stocked', 'section_id': 's-3'},
            {'id': 'q-7', 'text': 'Key cards counted', 'section_id': 's-3'},
        ],
        'members': [
            {'id': 'm-1', 'full_name': 'Ana', 'position': 'Supervisor', 'employee_number': 'E-01'},
            {'id': 'm-2', 'name': 'Bruno', 'position': 'Attendant'},
            {'id': 'm-3', 'name': 'Carla'},
        ],
        'runs': [
            {'id': 'r-1', 'area_id': 'a-1', 'template_id': 't-1', 'team_member_id': 'm-1',
             'executed_at': '2024-03-10T09:00:00Z', 'status': 'submitted', 'score': 75},
            {'id': 'r-2', 'area_id': 'a-1', 'template_id': 't-1', 'team_member_id': 'm-2',
             'executed_at': '2024-03-05T09:00:00Z', 'status': 'submitted', 'score': 50},
            {'id': 'r-3', 'area_id': 'a-2', 'audit_template_id': 't-2', 'member_id': 'm-1',
             'executed_at': '2024-03-12T09:00:00Z', 'status': 'submitted', 'score': 100},
            {'id': 'r-4', 'area_id': 'a-2', 'template_id': 't-2', 'member_id': 'm-2',
             'executed_at': '2024-02-20T09:00:00Z', 'status': 'submitted', 'score': 50},
            {'id': 'r-5', 'area_id': 'a-1', 'template_id': 't-1', 'member_id': 'm-3',
             'executed_at': '2024-01-15T09:00:00Z', 'status': 'submitted', 'score': 75},
            {'id': 'r-6', 'area_id': 'a-1', 'template_id': 't-1', 'member_id': 'm-1',
             'executed_at': '2024-03-14T09:00:00Z', 'status': 'draft', 'score': 0},
            {'id': 'r-7', 'area_id': 'a-2', 'template_id': 't-2', 'member_id': 'm-1',
             'executed_at': '2023-12-01T09:00:00Z', 'status': 'submitted', 'score': 80},
            {'id': 'r-8', 'area_id': 'a-1', 'template_id': 't-1', 'member_id': 'm-1',
             'executed_at': '2024-03-11T09:00:00Z', 'status': 'submitted', 'score': 10,
             'hotel_id': 'h-2'},
        ],
        'answers': [
            {'audit_run_id': 'r-1', 'question_id': 'q-1', 'result': 'FAIL'},
            {'audit_run_id': 'r-1', 'question_id': 'q-2', 'result': 'PASS'},
            {'audit_run_id': 'r-1', 'question_id': 'q-3', 'answer': 'pass'},
            {'audit_run_id': 'r-1', 'question_id': 'q-4', 'result': 'PASS', 'answer': 'FAIL'},
            {'run_id': 'r-2', 'question_id': 'q-1', 'result': 'FAIL'},
            {'run_id': 'r-2', 'question_id': 'q-2', 'result': 'PASS'},
            {'run_id': 'r-2', 'question_id': 'q-3', 'result': 'FAIL'},
            {'run_id': 'r-2', 'question_id': 'q-4', 'result': 'PASS'},
            {'run_id': 'r-3', 'question_id': 'q-5', 'result': 'PASS'},
            {'run_id': 'r-3', 'question_id': 'q-6', 'result': 'PASS'},
            {'run_id': 'r-3', 'question_id': 'q-7', 'result': 'PASS'},
            {'run_id': 'r-4', 'question_id': 'q-5', 'result': 'FAIL'},
            {'run_id': 'r-4', 'question_id': 'q-6', 'result': 'NA'},
            {'run_id': 'r-4', 'question_id': 'q-7', 'result': 'PASS'},
            {'run_id': 'r-5', 'question_id': 'q-1', 'result': 'PASS'},
            {'run_id': 'r-5', 'question_id': 'q-2', 'result': 'PASS'},
            {'run_id': 'r-5', 'question_id': 'q-3', 'result': 'PASS'},
            {'run_id': 'r-5', 'question_id': 'q-4', 'result': 'FAIL'},
            {'run_id': 'r-6', 'question_id': 'q-1', 'result': 'FAIL'},
            {'run_id': 'r-8', 'question_id': 'q-2', 'result': 'FAIL'},
        ],
    }


@pytest.fixture
def sample_snapshot(sample_rows):
    """AuditSnapshot built from sample_rows through the from_row normalizers."""
    return AuditSnapshot.from_rows(**sample_rows)
