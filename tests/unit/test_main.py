"""Tests for the command line entry point."""

import json
import logging
from collections.abc import Iterator

import pytest

from src.main import build_parser, load_event_file, main


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Iterator[None]:
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def events_file(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {
                    "title": "standup",
                    "start_time": "2024-03-15T09:00:00",
                    "end_time": "2024-03-15T09:30:00",
                    "identifier": "s1",
                },
                {
                    "title": "broken",
                    "start_time": "2024-03-15T12:00:00",
                    "end_time": "2024-03-15T11:00:00",
                    "identifier": "b1",
                },
            ]
        ),
        encoding="utf-8",
    )
    return path


def _output(capsys) -> dict:
    return json.loads(capsys.readouterr().out)


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.events is None
    assert args.mode is None


def test_load_event_file_accepts_wrapped_list(tmp_path):
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"events": [{"title": "x"}]}), encoding="utf-8")
    assert load_event_file(path) == [{"title": "x"}]
    assert load_event_file(None) == []


def test_load_event_file_rejects_scalars(tmp_path):
    path = tmp_path / "scalar.json"
    path.write_text("42", encoding="utf-8")
    with pytest.raises(ValueError):
        load_event_file(path)


def test_month_view_output(events_file, capsys):
    assert main(["--events", str(events_file), "--date", "2024-03-15"]) == 0

    payload = _output(capsys)
    assert payload["title"] == "March 2024"
    assert len(payload["view"]["dates"]) == 42
    assert payload["selection"]["selected_time"] == "2024-03-15T00:00:00"
    assert [entry["identifier"] for entry in payload["rejected"]] == ["b1"]
    assert payload["detail"] == ["09:00 - 09:30 standup"]
    assert payload["hour_column"] == []


def test_day_view_with_selection(events_file, capsys):
    exit_code = main(
        [
            "--events",
            str(events_file),
            "--date",
            "2024-03-15",
            "--mode",
            "day",
            "--step",
            "30",
            "--start-hour",
            "8",
            "--end-hour",
            "12",
            "--select",
            "2024-03-15T09:10:00",
        ]
    )

    assert exit_code == 0
    payload = _output(capsys)
    assert payload["title"] == "March 15, 2024"
    assert len(payload["view"]["rows"]) == 8
    assert payload["selection"]["selected_time"] == "2024-03-15T09:00:00"
    assert payload["selection"]["events"][0]["identifier"] == "s1"
    assert payload["detail"] == ["09:00 - 09:30 standup"]
    assert payload["hour_column"][:2] == ["8AM", "8:30AM"]


def test_invalid_step_fails(capsys):
    assert main(["--mode", "day", "--step", "45"]) == 1


def test_missing_events_file_fails(tmp_path):
    assert main(["--events", str(tmp_path / "missing.json")]) == 1


def test_week_view_date_selection(capsys):
    exit_code = main(
        [
            "--date",
            "2024-03-15",
            "--mode",
            "week",
            "--start-hour",
            "8",
            "--select",
            "2024-03-14",
        ]
    )

    assert exit_code == 0
    assert _output(capsys)["selection"]["selected_time"] == "2024-03-14T08:00:00"


def test_utc_events_in_day_view(tmp_path, capsys):
    path = tmp_path / "utc.json"
    path.write_text(
        json.dumps(
            [
                {
                    "title": "call",
                    "start_time": "2024-03-15T09:00:00Z",
                    "end_time": "2024-03-15T10:00:00Z",
                    "identifier": "c1",
                }
            ]
        ),
        encoding="utf-8",
    )

    assert main(["--events", str(path), "--date", "2024-03-15", "--mode", "day"]) == 0

    payload = _output(capsys)
    assert payload["rejected"] == []
    assert payload["view"]["rows"][9]["events"][0]["event"]["identifier"] == "c1"
