"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from pest_correlation import __version__
from pest_correlation.config import get_settings
from pest_correlation.errors import CorrelationError
from pest_correlation.flows.fetch import fetch_weather, serve_schedule
from pest_correlation.manager import AnalysisManager
from pest_correlation.repositories import JsonDetectionStore
from pest_correlation.schemas import DetectionRecord
from pest_correlation.store import DataStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from pest_correlation.schemas import AnalysisRecord


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pest-correlation",
        description="Correlate weather conditions with leaf-disease detections",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    fetch_parser = subparsers.add_parser("fetch-weather", help="Fetch and store current weather")
    fetch_parser.add_argument("--location", default=None, help="Location query (default: settings)")
    fetch_parser.add_argument(
        "--schedule",
        action="store_true",
        help="Keep fetching every fetch_interval_hours instead of once",
    )

    analyze_parser = subparsers.add_parser("analyze", help="Run a new correlation analysis")
    _add_range_arguments(analyze_parser)

    list_parser = subparsers.add_parser("list", help="List stored analyses, newest first")
    list_parser.add_argument("--owner", default=None, help="Only analyses with this owner filter")
    list_parser.add_argument("--limit", type=int, default=None, help="Maximum analyses to show")

    show_parser = subparsers.add_parser("show", help="Show one analysis as JSON")
    show_parser.add_argument("analysis_id")

    annotate_parser = subparsers.add_parser("annotate", help="Set an analysis name and/or notes")
    annotate_parser.add_argument("analysis_id")
    annotate_parser.add_argument("--name", default=None)
    annotate_parser.add_argument("--notes", default=None)

    rerun_parser = subparsers.add_parser("rerun", help="Re-run an analysis in place")
    rerun_parser.add_argument("analysis_id")
    _add_range_arguments(rerun_parser)

    delete_parser = subparsers.add_parser("delete", help="Delete an analysis")
    delete_parser.add_argument("analysis_id")

    import_parser = subparsers.add_parser(
        "import-detections", help="Import detection records from a JSON file"
    )
    import_parser.add_argument("path", type=Path)

    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def _add_range_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", default=None, help="Start date YYYY-MM-DD")
    parser.add_argument("--end", default=None, help="End date YYYY-MM-DD (default: today)")
    parser.add_argument("--owner", default=None, help="Only detections from this submitter")


def _manager() -> AnalysisManager:
    settings = get_settings()
    return AnalysisManager.from_store(DataStore(settings.data_dir), settings)


def _print_record(record: AnalysisRecord) -> None:
    title = f"{record.name} ({record.id})" if record.name else record.id
    print(f"Analysis {title}")
    print(f"  Range: {record.date_range}  Owner: {record.owner_filter}")
    print(
        f"  Weather observations: {record.weather_data_points}  "
        f"Detections: {record.total_detections}"
    )
    for result in record.correlations:
        print(
            f"  {result.condition:<26} {result.disease_rate:>3}%  "
            f"days={result.weather_days} samples={result.sample_size.label}"
        )
    for insight in record.insights:
        print(f"  [{insight.type}] {insight.message}")


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Data directory: {settings.data_dir}")
    print(f"Default location: {settings.default_location}")
    return 0


def cmd_fetch_weather(args: argparse.Namespace) -> int:
    """Handle the 'fetch-weather' command."""
    if args.schedule:
        serve_schedule()
        return 0
    result = fetch_weather(location=args.location)
    print(f"Stored weather observation {result['weather_id']}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle the 'analyze' command."""
    record = _manager().create(args.start, args.end, args.owner)
    _print_record(record)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle the 'list' command."""
    limit = args.limit if args.limit is not None else get_settings().default_list_limit
    records = _manager().list_analyses(args.owner, limit)
    if not records:
        print("No analyses found.")
    for record in records:
        label = f" {record.name!r}" if record.name else ""
        created = record.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"{record.id}{label}  {record.date_range}  created {created}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Handle the 'show' command."""
    record = _manager().get(args.analysis_id)
    print(record.model_dump_json(indent=2, by_alias=True))
    return 0


def cmd_annotate(args: argparse.Namespace) -> int:
    """Handle the 'annotate' command."""
    record = _manager().update_metadata(args.analysis_id, name=args.name, notes=args.notes)
    print(f"Updated {record.id}")
    return 0


def cmd_rerun(args: argparse.Namespace) -> int:
    """Handle the 'rerun' command."""
    record = _manager().rerun(args.analysis_id, args.start, args.end, args.owner)
    _print_record(record)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Handle the 'delete' command."""
    _manager().delete(args.analysis_id)
    print(f"Deleted {args.analysis_id}")
    return 0


def cmd_import_detections(args: argparse.Namespace) -> int:
    """Handle the 'import-detections' command.

    Accepts a JSON list of detections, or an object with the list under
    ``data`` or ``Items`` (a raw table export).
    """
    path: Path = args.path
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return 1

    try:
        with path.open() as f:
            raw: Any = json.load(f)
    except json.JSONDecodeError as exc:
        print(f"Not a JSON file: {path} ({exc})", file=sys.stderr)
        return 1

    items = (raw.get("data") or raw.get("Items") or []) if isinstance(raw, dict) else raw
    if not isinstance(items, list):
        print(f"Expected a list of detections in {path}", file=sys.stderr)
        return 1

    try:
        records = [DetectionRecord.model_validate(item) for item in items]
    except PydanticValidationError as exc:
        print(f"Invalid detection record: {exc}", file=sys.stderr)
        return 1

    store = JsonDetectionStore(DataStore(get_settings().data_dir))
    for record in records:
        store.add(record)
    print(f"Imported {len(records)} detections from {path}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port
    print(f"Serving API on http://{settings.api_host}:{port}/ (Ctrl+C to stop)")
    uvicorn.run("pest_correlation.api:app", host=settings.api_host, port=port)
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "info": cmd_info,
    "fetch-weather": cmd_fetch_weather,
    "analyze": cmd_analyze,
    "list": cmd_list,
    "show": cmd_show,
    "annotate": cmd_annotate,
    "rerun": cmd_rerun,
    "delete": cmd_delete,
    "import-detections": cmd_import_detections,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    level = logging.DEBUG if args.debug or settings.debug else settings.log_level
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except CorrelationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
