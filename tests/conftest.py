"""
Shared fixtures.

- Adds the project root to ``sys.path`` so ``import src.*`` resolves
- Resets the cached settings around every test (autouse)
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from datetime import date, datetime
from pathlib import Path

import pytest

# Project root (parent of this file's parent)
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Pin the environment and start every test with fresh settings."""
    from src.config import clear_settings_cache

    monkeypatch.setenv("ENVIRONMENT", "testing")
    for name in (
        "CALENDAR_MODE",
        "CALENDAR_STEP",
        "CALENDAR_START_HOUR",
        "CALENDAR_END_HOUR",
        "CALENDAR_WEEK_START_OFFSET",
        "CALENDAR_AUTO_SELECT",
        "CALENDAR_QUERY_MODE",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_event() -> Callable[..., object]:
    """Factory building events from ``HH:MM`` strings on a given day."""
    from src.calendar_view.models import Event

    def _make(
        start: str,
        end: str,
        day: date = date(2024, 3, 15),
        end_day: date | None = None,
        title: str = "event",
        all_day: bool = False,
        identifier: str | None = None,
    ) -> Event:
        start_hour, start_minute = (int(part) for part in start.split(":"))
        end_hour, end_minute = (int(part) for part in end.split(":"))
        return Event(
            title=title,
            start_time=datetime.combine(day, datetime.min.time()).replace(
                hour=start_hour, minute=start_minute
            ),
            end_time=datetime.combine(end_day or day, datetime.min.time()).replace(
                hour=end_hour, minute=end_minute
            ),
            all_day=all_day,
            identifier=identifier or title,
        )

    return _make
