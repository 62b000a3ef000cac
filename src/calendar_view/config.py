"""Engine configuration and its validation rules."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.calendar_view.exceptions import ConfigurationError
from src.calendar_view.formatter import DateFormatter
from src.calendar_view.models import CalendarMode, Event, QueryMode, Range

if TYPE_CHECKING:
    from src.config.settings import Settings

MarkDisabled = Callable[[date], bool]
EventLoader = Callable[[Range], Iterable[Event | dict[str, Any]]]


def check_step(step: int) -> int:
    """Validate slot width in minutes."""
    if step <= 0 or 60 % step != 0:
        raise ConfigurationError(
            f"step must evenly divide 60 minutes, got {step}", field="step", value=step
        )
    return step


def check_hour_bounds(start_hour: int, end_hour: int) -> tuple[int, int]:
    """Validate the visible hour window of day/week grids."""
    if not 0 <= start_hour <= 24:
        raise ConfigurationError(
            f"start_hour must be within 0-24, got {start_hour}",
            field="start_hour",
            value=start_hour,
        )
    if not 0 <= end_hour <= 24:
        raise ConfigurationError(
            f"end_hour must be within 0-24, got {end_hour}",
            field="end_hour",
            value=end_hour,
        )
    if start_hour >= end_hour:
        raise ConfigurationError(
            f"start_hour ({start_hour}) must be before end_hour ({end_hour})",
            field="start_hour",
            value=start_hour,
        )
    return start_hour, end_hour


def check_week_start(week_start_offset: int) -> int:
    """Validate the week-start weekday, 0 = Sunday .. 6 = Saturday."""
    if not 0 <= week_start_offset <= 6:
        raise ConfigurationError(
            f"week_start_offset must be within 0-6, got {week_start_offset}",
            field="week_start_offset",
            value=week_start_offset,
        )
    return week_start_offset


class CalendarConfig(BaseModel):
    """Calendar engine options.

    Invalid combinations raise :class:`ConfigurationError` on construction and
    on :meth:`replace`; values are never clamped.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    mode: CalendarMode = Field(default=CalendarMode.MONTH)
    step: int = Field(default=60, description="Slot width in minutes")
    start_hour: int = Field(default=0)
    end_hour: int = Field(default=24)
    week_start_offset: int = Field(default=0, description="0 = Sunday")
    auto_select: bool = Field(default=True)
    query_mode: QueryMode = Field(default=QueryMode.LOCAL)
    mark_disabled: MarkDisabled | None = Field(default=None)
    formatter: DateFormatter = Field(default_factory=DateFormatter)
    show_event_detail: bool = Field(default=True)
    no_events_label: str = Field(default="No Events")
    all_day_label: str = Field(default="all day")

    @model_validator(mode="after")
    def validate_grid(self) -> CalendarConfig:
        check_step(self.step)
        check_hour_bounds(self.start_hour, self.end_hour)
        check_week_start(self.week_start_offset)
        return self

    @property
    def slots_per_hour(self) -> int:
        return 60 // self.step

    @property
    def slots_per_day(self) -> int:
        return (self.end_hour - self.start_hour) * self.slots_per_hour

    def is_disabled(self, day: date) -> bool:
        return bool(self.mark_disabled and self.mark_disabled(day))

    def replace(self, **changes: Any) -> CalendarConfig:
        """Return a validated copy with the given fields changed."""
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            name = sorted(unknown)[0]
            raise ConfigurationError(f"Unknown option '{name}'", field=name)
        return type(self)(**{**dict(self), **changes})

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> CalendarConfig:
        """Build a configuration from application settings defaults."""
        values: dict[str, Any] = {
            "mode": settings.calendar_mode,
            "step": settings.calendar_step,
            "start_hour": settings.calendar_start_hour,
            "end_hour": settings.calendar_end_hour,
            "week_start_offset": settings.calendar_week_start_offset,
            "auto_select": settings.calendar_auto_select,
            "query_mode": settings.calendar_query_mode,
            "no_events_label": settings.calendar_no_events_label,
            "all_day_label": settings.calendar_all_day_label,
        }
        values.update(overrides)
        return cls(**values)
