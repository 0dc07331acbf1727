"""
Hotel Audit Analytics - Audit Model Unit Tests

Tests record normalization at the data boundary:
- Column aliases resolved by from_row()
- Answer value resolution (result over answer, case-insensitive)
- Integer coercion of area sort_order
- Snapshot lookups
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from models import (
    FAIL, NA, PASS, Answer, Area, AuditSnapshot, Member, Question, Run, Section, Template,
    name_of, normalize_answer_value, resolve_answer_value, value_or_default_pass,
)

UTC = ZoneInfo('UTC')
MADRID = ZoneInfo('Europe/Madrid')


class TestAnswerValues:
    """Test the answer value rules."""

    @pytest.mark.parametrize("raw,expected", [
        ('PASS', PASS), ('fail', FAIL), (' Na ', NA), ('maybe', None), (None, None), (1, None),
    ])
    def test_normalize_answer_value(self, raw, expected):
        assert normalize_answer_value(raw) == expected

    def test_result_wins_over_answer(self):
        assert resolve_answer_value('PASS', 'FAIL') == PASS

    def test_unreadable_result_does_not_fall_back(self):
        assert resolve_answer_value('pending', 'FAIL') is None

    def test_answer_used_when_result_missing(self):
        assert resolve_answer_value(None, 'fail') == FAIL

    def test_nothing_readable(self):
        assert resolve_answer_value(None, None) is None

    def test_missing_value_defaults_to_pass(self):
        assert value_or_default_pass(None) == PASS
        assert value_or_default_pass(NA) == NA


class TestFromRow:
    """Test from_row() alias handling."""

    def test_answer_aliases(self):
        answer = Answer.from_row({'audit_run_id': 7, 'question_id': 3, 'result': 'FAIL', 'answer': 'PASS'})
        assert answer == Answer(run_id='7', question_id='3', value=FAIL)

    def test_unreadable_result_wins_over_answer(self):
        answer = Answer.from_row({'run_id': 'r-1', 'question_id': 'q-1', 'result': 'pending', 'answer': 'FAIL'})
        assert answer.value is None

    def test_answer_with_resolved_value(self):
        assert Answer.from_row({'run_id': 'r-1', 'question_id': 'q-1', 'value': 'na'}).value == NA

    def test_run_aliases_and_timestamp(self):
        run = Run.from_row({
            'id': 1, 'area_id': 2, 'audit_template_id': 3, 'team_member_id': 4,
            'executed_at': '2024-03-31T22:30:00Z', 'status': 'submitted', 'score': '88.5',
        }, MADRID)

        assert (run.id, run.area_id, run.template_id, run.member_id) == ('1', '2', '3', '4')
        assert run.executed_at == datetime(2024, 4, 1, 0, 30, tzinfo=MADRID)
        assert run.is_submitted is True
        assert run.hotel_id is None

    def test_run_with_unreadable_timestamp(self):
        run = Run.from_row({'id': 'r-1', 'area_id': 'a-1', 'executed_at': 'yesterday'})
        assert run.executed_at is None
        assert run.is_submitted is False

    def test_question_aliases_and_blank_tags(self):
        question = Question.from_row({'id': 'q-1', 'text': 'Exits', 'audit_section_id': 's-1', 'tag': '  '})
        assert question.section_id == 's-1'
        assert question.tag is None
        assert question.active is True

    def test_inactive_question(self):
        assert Question.from_row({'id': 'q-1', 'text': 'Old', 'active': False}).active is False

    def test_section_defaults(self):
        section = Section.from_row({'id': 's-1', 'audit_template_id': 't-1'})
        assert section.name == 'Unsectioned'
        assert section.template_id == 't-1'

    def test_area_group(self):
        assert Area.from_row({'id': 'a-1', 'name': 'Spa'}).group == 'Uncategorized'
        assert Area.from_row({'id': 'a-1', 'name': 'Bar', 'type': 'F&B'}).group == 'F&B'

    @pytest.mark.parametrize("raw,expected", [
        (3, 3), ('2', 2), (' 7 ', 7), (4.0, 4), (2.5, None), ('first', None), (True, None), (None, None),
    ])
    def test_area_sort_order_coerced(self, raw, expected):
        assert Area.from_row({'id': 'a-1', 'name': 'Spa', 'sort_order': raw}).sort_order == expected

    def test_template_default_name(self):
        assert Template.from_row({'id': 't-1'}).name == 'Audit'

    def test_member_full_name(self):
        member = Member.from_row({'team_member_id': 'm-1', 'full_name': 'Ana'})
        assert (member.id, member.name) == ('m-1', 'Ana')


class TestAuditSnapshot:
    """Test AuditSnapshot lookups."""

    def test_from_rows(self, sample_snapshot):
        assert len(sample_snapshot.runs) == 8
        assert sample_snapshot.members_by_id['m-1'].name == 'Ana'
        assert sample_snapshot.sections_by_id['s-3'].template_id == 't-2'

    def test_answers_by_run(self, sample_snapshot):
        answers = sample_snapshot.answers_by_run['r-1']
        assert [a.value for a in answers] == [FAIL, PASS, PASS, PASS]

    def test_member_by_run(self, sample_snapshot):
        assert sample_snapshot.member_by_run['r-1'] == 'm-1'
        assert sample_snapshot.member_by_run['r-4'] == 'm-2'

    def test_empty_snapshot(self):
        snapshot = AuditSnapshot()
        assert snapshot.answers_by_run == {}
        assert snapshot.questions_by_id == {}

    def test_name_of(self, sample_snapshot):
        templates = sample_snapshot.templates_by_id
        assert name_of(templates, 't-1') == 'Room inspection'
        assert name_of(templates, 't-404', 'Audit') == 'Audit'
        assert name_of(templates, None) == '—'

    def test_to_dict(self, sample_snapshot):
        run = sample_snapshot.runs[0]
        assert run.to_dict()['executed_at'] == '2024-03-10T09:00:00+00:00'
