"""
Hotel Audit Analytics - Dashboard Build Script Tests

Runs scripts.build_dashboard.main() against a snapshot file written to a
temporary directory.
"""

import json

import pytest

from scripts.build_dashboard import load_snapshot, main

NOW = '2024-03-15T12:00:00+00:00'


@pytest.fixture
def snapshot_file(tmp_path, sample_rows):
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps(sample_rows), encoding='utf-8')
    return path


class TestLoadSnapshot:
    """Test load_snapshot()."""

    def test_reads_row_lists(self, snapshot_file):
        snapshot = load_snapshot(str(snapshot_file))
        assert len(snapshot.runs) == 8
        assert len(snapshot.members) == 3

    def test_missing_tables_are_empty(self, tmp_path):
        path = tmp_path / 'partial.json'
        path.write_text(json.dumps({'runs': []}), encoding='utf-8')
        assert load_snapshot(str(path)).answers == ()

    def test_rejects_non_object(self, tmp_path):
        path = tmp_path / 'list.json'
        path.write_text('[]', encoding='utf-8')
        with pytest.raises(ValueError):
            load_snapshot(str(path))


class TestMain:
    """Test main() views and exit codes."""

    def test_hotel_view_to_file(self, snapshot_file, tmp_path):
        output = tmp_path / 'hotel.json'

        code = main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--now', NOW,
                     '--output', str(output)])

        assert code == 0
        payload = json.loads(output.read_text(encoding='utf-8'))
        assert payload['gauges']['month'] == {'avg': 75.0, 'count': 3}
        assert payload['heatmap']['summary_label'] == '12M'

    def _run_view(self, snapshot_file, tmp_path, *extra):
        output = tmp_path / 'view.json'
        code = main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--now', NOW,
                     '--output', str(output), *extra])
        assert code == 0
        return json.loads(output.read_text(encoding='utf-8'))

    def test_area_view(self, snapshot_file, tmp_path):
        payload = self._run_view(snapshot_file, tmp_path, '--view', 'area', '--area-id', 'a-1')
        assert payload['window_avg'] == {'avg': 62.5, 'count': 2}

    def test_people_view_sort_toggles(self, snapshot_file, tmp_path):
        payload = self._run_view(snapshot_file, tmp_path, '--view', 'people', '--sort-key', 'fail_rate_pct')

        assert payload['sort'] == {'key': 'fail_rate_pct', 'direction': 'asc'}
        assert [r['member_id'] for r in payload['ranking']] == ['m-1', 'm-2']

    def test_member_view(self, snapshot_file, tmp_path):
        payload = self._run_view(snapshot_file, tmp_path, '--view', 'member', '--member-id', 'm-2')
        assert payload['report']['audits_count'] == 2

    def test_stdout_output(self, snapshot_file, capsys):
        code = main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--now', NOW,
                     '--view', 'member', '--member-id', 'm-2', '--indent', '0'])

        assert code == 0
        assert '"audits_count": 2' in capsys.readouterr().out

    def test_unreadable_snapshot_exits_1(self, tmp_path):
        assert main(['--input', str(tmp_path / 'missing.json'), '--hotel-id', 'h-1']) == 1

    def test_invalid_json_exits_1(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('{not json', encoding='utf-8')
        assert main(['--input', str(path), '--hotel-id', 'h-1']) == 1

    def test_invalid_argument_exits_2(self, snapshot_file):
        code = main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--now', NOW,
                     '--view', 'area', '--area-id', 'a-404'])
        assert code == 2

    def test_unknown_sort_key_exits_2(self, snapshot_file):
        code = main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--now', NOW,
                     '--view', 'people', '--sort-key', 'shoe_size'])
        assert code == 2

    def test_area_view_requires_area_id(self, snapshot_file):
        with pytest.raises(SystemExit) as exc_info:
            main(['--input', str(snapshot_file), '--hotel-id', 'h-1', '--view', 'area'])
        assert exc_info.value.code == 2
