#!/usr/bin/env python3
"""
Hotel Audit Analytics - Dashboard Build Script
Loads a JSON snapshot of audit rows and prints one dashboard view as JSON.

The snapshot file holds the already-fetched rows, one list per table:
    {"runs": [...], "answers": [...], "questions": [...], "sections": [...],
     "areas": [...], "templates": [...], "members": [...]}

Usage:
    python -m scripts.build_dashboard --input snapshot.json --hotel-id H
        [--view hotel|area|people|member] [--area-id A] [--member-id M]
        [--period THIS_MONTH] [--template-id T] [--from YYYY-MM-DD] [--to YYYY-MM-DD]
        [--now ISO-8601] [--sort-key fail_rate_pct] [--output out.json]

Exit codes:
    0  dashboard written
    1  snapshot could not be read
    2  invalid arguments
"""

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

# Add src to path
backend_src = Path(__file__).parent.parent
sys.path.insert(0, str(backend_src.absolute()))

from utils.logger import logger
from models import AuditSnapshot
from analytics.dashboard import DashboardService
from analytics.errors import InvalidArgumentError
from analytics.rankings import SortState

VIEWS = ('hotel', 'area', 'people', 'member')
TABLES = ('runs', 'answers', 'questions', 'sections', 'areas', 'templates', 'members')


def load_snapshot(path: str, tz=None) -> AuditSnapshot:
    """
    Read a snapshot file.

    Raises:
        OSError: If the file cannot be opened
        ValueError: If it is not a JSON object of row lists
    """
    with open(path, encoding='utf-8') as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a JSON object")
    return AuditSnapshot.from_rows(tz=tz, **{table: data.get(table) or [] for table in TABLES})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Build a hotel audit dashboard from a JSON snapshot'
    )
    parser.add_argument('--input', required=True, help='Snapshot JSON file')
    parser.add_argument('--hotel-id', required=True, help='Hotel the dashboard is scoped to')
    parser.add_argument('--view', choices=VIEWS, default='hotel', help='Dashboard view (default: hotel)')
    parser.add_argument('--area-id', help='Area for --view area')
    parser.add_argument('--member-id', help='Member for --view member')
    parser.add_argument('--period', help='Period key, e.g. THIS_MONTH, LAST_3_MONTHS, 30, CUSTOM')
    parser.add_argument('--template-id', help='Restrict to one template')
    parser.add_argument('--from', dest='custom_from', help='CUSTOM range start (YYYY-MM-DD)')
    parser.add_argument('--to', dest='custom_to', help='CUSTOM range end (YYYY-MM-DD)')
    parser.add_argument('--now', help='Reference instant (ISO-8601, default: current time)')
    parser.add_argument('--heatmap-period', default='ROLLING_12M',
                        help='Hotel heatmap span: ROLLING_12M or THIS_YEAR')
    parser.add_argument('--sort-key', help='People ranking sort key (selecting it again reverses it)',
                        action='append')
    parser.add_argument('--output', help='Write to this file instead of stdout')
    parser.add_argument('--indent', type=int, default=2, help='JSON indent (default: 2)')
    return parser


def build_view(service: DashboardService, args: argparse.Namespace) -> dict:
    if args.view == 'hotel':
        return service.hotel_dashboard(heatmap_period=args.heatmap_period)
    if args.view == 'area':
        return service.area_dashboard(args.area_id, args.period, args.template_id,
                                      args.custom_from, args.custom_to)
    if args.view == 'people':
        sort_state = SortState()
        for key in args.sort_key or []:
            sort_state = sort_state.toggle(key)
        return service.people_analytics(args.period, args.template_id,
                                        args.custom_from, args.custom_to, sort_state)
    return service.member_report(args.member_id, args.period, args.template_id,
                                 args.custom_from, args.custom_to)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.view == 'area' and not args.area_id:
        parser.error('--area-id is required for --view area')
    if args.view == 'member' and not args.member_id:
        parser.error('--member-id is required for --view member')

    try:
        snapshot = load_snapshot(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read snapshot {args.input}: {e}")
        return 1

    try:
        service = DashboardService(snapshot, args.hotel_id, now=args.now)
        payload = build_view(service, args)
    except InvalidArgumentError as e:
        logger.error(f"Invalid argument: {e}")
        return 2

    output = json.dumps(payload, indent=args.indent, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(output + '\n', encoding='utf-8')
        logger.info(f"Dashboard written to {args.output}")
    else:
        print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
