"""
Command line entry point: build one calendar page and print it as JSON
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console

from src import __version__
from src.calendar_view import (
    CalendarConfig,
    CalendarEngine,
    CalendarError,
    detail_lines,
    hour_column,
)
from src.config import get_settings
from src.utils import get_logger, log_function_call, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calendar-view",
        description="Compute a day, week or month calendar grid from a JSON event list.",
    )
    parser.add_argument("--events", type=Path, help="JSON file holding a list of events")
    parser.add_argument("--date", help="Reference date (YYYY-MM-DD), default today")
    parser.add_argument("--mode", choices=["day", "week", "month"])
    parser.add_argument("--step", type=int, help="Slot width in minutes")
    parser.add_argument("--start-hour", type=int)
    parser.add_argument("--end-hour", type=int)
    parser.add_argument("--week-start", type=int, help="0 = Sunday .. 6 = Saturday")
    parser.add_argument("--select", help="Cell to select (date or ISO datetime)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_event_file(path: Path | None) -> list[dict[str, Any]]:
    """Read the event list; a top-level ``events`` key is accepted too."""
    if path is None:
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of events")
    return data


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()
    logger = get_logger("main")

    overrides = {
        key: value
        for key, value in {
            "mode": args.mode,
            "step": args.step,
            "start_hour": args.start_hour,
            "end_hour": args.end_hour,
            "week_start_offset": args.week_start,
        }.items()
        if value is not None
    }

    try:
        config = CalendarConfig.from_settings(get_settings(), **overrides)
        events = load_event_file(args.events)
        log_function_call("CalendarEngine", mode=config.mode.value, events=len(events))
        engine = CalendarEngine(config=config, event_source=events, reference_date=args.date)
        if args.select:
            engine.select_cell(args.select)
    except (CalendarError, OSError, ValueError) as exc:
        logger.error("Failed to build calendar view", error=str(exc))
        return 1

    payload = {
        "title": engine.title,
        "range": engine.range.model_dump(mode="json"),
        "view": engine.view.model_dump(mode="json"),
        "hour_column": hour_column(engine.view, engine.config),
        "selection": engine.selection.model_dump(mode="json") if engine.selection else None,
        "detail": detail_lines(engine.selection, engine.config),
        "rejected": [
            {"index": error.index, "identifier": error.identifier, "error": str(error)}
            for error in engine.rejected_events
        ],
    }
    Console().print_json(json.dumps(payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())
