# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Provides command-line interface to the dashboard.
#   This is how users interact with the system.
#
# COMMANDS:
# ---------
# 1. Fetch from the export API and show per-field insights:
#    python -m field_insights.cli export
#    python -m field_insights.cli export --path /export-data --path /export-archive
#
# 2. Show insights for records stored in a JSON file:
#    python -m field_insights.cli report records.json
#
# DISPLAY OPTIONS (both commands):
# --------------------------------
#    --field NAME     only show these fields (repeatable)
#    --expand NAME    show every value of these fields (repeatable)
#    --all            expand every field
#    --json           print insights + chart data as JSON
#
# ==============================================

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from field_insights import __version__
from field_insights.config import LOG_LEVEL_CHOICES, get_config
from field_insights.dashboard import InsightDashboard
from field_insights.errors import FieldInsightsError
from field_insights.logging import set_level
from field_insights.render import render_dashboard


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="field-insights",
        description="Per-field value frequencies for analytics exports.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVEL_CHOICES,
                        help="Override LOG_LEVEL.")

    display = argparse.ArgumentParser(add_help=False)
    display.add_argument("--field", action="append", default=[], dest="fields",
                         help="Only show this field (repeatable).")
    display.add_argument("--expand", action="append", default=[],
                         help="Show every value of this field (repeatable).")
    display.add_argument("--all", action="store_true", dest="expand_all",
                         help="Expand every field.")
    display.add_argument("--json", action="store_true", dest="as_json",
                         help="Print insights and chart data as JSON.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", parents=[display],
                                   help="Fetch from the export API and show insights.")
    export.add_argument("--path", action="append", default=[], dest="paths",
                        help="Export endpoint path (repeatable, default from EXPORT_PATHS).")

    report = subparsers.add_parser("report", parents=[display],
                                   help="Show insights for a JSON file of records.")
    report.add_argument("file", type=Path,
                        help='JSON list of records, or an object with a "data" list.')

    return parser


def load_records_file(path: Path) -> List[Any]:
    """
    Read records from a JSON file.

    Accepts either a bare list or the export payload shape {"data": [...]}.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FieldInsightsError(f"Cannot read {path}: {e}") from e
    except ValueError as e:
        raise FieldInsightsError(f"{path} is not valid JSON: {e}") from e

    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise FieldInsightsError(f"{path}: unexpected data format")
    return payload


def insights_as_json(dashboard: InsightDashboard, fields: List[str]) -> Dict[str, Any]:
    output = {}
    for field_name in fields:
        field_insight = dashboard.field_insight(field_name)
        entry = field_insight.to_dict()
        entry["chart"] = dashboard.chart_data(field_name).to_chartjs()
        output[field_name] = entry
    return output


def show(dashboard: InsightDashboard, args: argparse.Namespace) -> None:
    selected = args.fields or dashboard.fields()
    unknown = [f for f in selected if f not in dashboard.fields()]
    for field_name in unknown:
        print(f"⚠ Unknown field: {field_name}", file=sys.stderr)
    selected = [f for f in selected if f not in unknown]

    to_expand = dashboard.fields() if args.expand_all else args.expand
    for field_name in to_expand:
        if not dashboard.is_expanded(field_name):
            dashboard.toggle_field_expansion(field_name)

    if args.as_json:
        print(json.dumps(insights_as_json(dashboard, selected), indent=2))
        return

    cards = [card for card in dashboard.field_cards() if card["field"] in selected]
    print(render_dashboard(cards))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = get_config()
    except FieldInsightsError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    set_level(args.log_level or config.log_level)

    with InsightDashboard(config) as dashboard:
        if args.command == "export":
            result = dashboard.export_data(args.paths or None)
            if result["status"] != "success":
                print(f"✗ Error: {result['error']}", file=sys.stderr)
                return 1
        else:
            try:
                records = load_records_file(args.file)
            except FieldInsightsError as e:
                print(f"✗ Error: {e}", file=sys.stderr)
                return 1
            result = dashboard.load_records(records)

        if not args.as_json:
            print(f"✓ {dashboard.status_message}: {result['records_processed']} records, "
                  f"{result['fields']} fields")
        show(dashboard, args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
