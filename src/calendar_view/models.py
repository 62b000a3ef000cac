"""Calendar view-model data models."""

from datetime import date as date_type
from datetime import datetime, time, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CalendarMode(str, Enum):
    """Calendar display mode."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class QueryMode(str, Enum):
    """Whether events are fully loaded locally or fetched per range."""

    LOCAL = "local"
    REMOTE = "remote"


class Step(int, Enum):
    """Slot width in minutes."""

    QUARTER_HOUR = 15
    HALF_HOUR = 30
    HOUR = 60


class Event(BaseModel):
    """Calendar event supplied by the host.

    Extra host fields (colour, status, ...) are preserved untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str = Field(default="", description="Event title")
    start_time: datetime = Field(..., description="Event start instant")
    end_time: datetime = Field(..., description="Event end instant")
    all_day: bool = Field(default=False, description="Spans whole calendar days")
    identifier: str | None = Field(default=None, description="Host identifier")

    @model_validator(mode="after")
    def validate_interval(self) -> "Event":
        """Validate timestamp kinds and that start is not after end."""
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError(
                "Event start_time and end_time must both be naive or both be aware"
            )
        if self.start_time > self.end_time:
            raise ValueError("Event start_time cannot be after end_time")
        return self

    @property
    def is_zero_length(self) -> bool:
        return self.start_time == self.end_time

    @property
    def is_aware(self) -> bool:
        return self.start_time.tzinfo is not None

    def first_date(self) -> date_type:
        """First calendar date covered by an all-day event."""
        return self.start_time.date()

    def last_date(self) -> date_type:
        """Last calendar date covered by an all-day event (inclusive).

        An end exactly on midnight after the start is exclusive.
        """
        end = self.end_time
        if end > self.start_time and end.time() == time.min:
            return end.date() - timedelta(days=1)
        return end.date()

    def covers_date(self, day: date_type) -> bool:
        """Check whether an all-day event covers the given date."""
        return self.first_date() <= day <= self.last_date()

    def intersects(self, start: datetime, end: datetime) -> bool:
        """Check whether the event overlaps the half-open window [start, end)."""
        if self.is_zero_length:
            return start <= self.start_time < end
        return self.start_time < end and self.end_time > start


class Range(BaseModel):
    """Visible window, half-open [start_time, end_time)."""

    model_config = ConfigDict(frozen=True)

    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def validate_bounds(self) -> "Range":
        if self.start_time >= self.end_time:
            raise ValueError("Range start_time must be before end_time")
        return self

    def contains(self, instant: datetime) -> bool:
        return self.start_time <= instant < self.end_time

    def intersects(self, start: datetime, end: datetime) -> bool:
        if start == end:
            return self.contains(start)
        return start < self.end_time and end > self.start_time


class DisplayEvent(BaseModel):
    """An event positioned on a day/week grid.

    ``start_index``/``end_index`` are slot indices (end exclusive) inside one
    column. Offsets are the fraction of the first/last slot the event does not
    cover. ``overlap_number`` is the 0-based lane and ``position`` the number
    of lanes in the event's overlap group, so the rendered width is
    ``1 / position``. ``layout_start``/``layout_end`` hold the clipped
    instants; the wrapped event keeps its true times.
    """

    model_config = ConfigDict(frozen=True)

    event: Event
    start_index: int = Field(default=0, ge=0)
    end_index: int = Field(default=1, ge=1)
    start_offset: float | None = Field(default=None, ge=0, lt=1)
    end_offset: float | None = Field(default=None, ge=0, lt=1)
    overlap_number: int = Field(default=0, ge=0)
    position: int = Field(default=1, ge=1)
    layout_start: datetime
    layout_end: datetime

    @classmethod
    def for_event(cls, event: Event) -> "DisplayEvent":
        """Wrap an event using its own interval as the layout interval."""
        return cls(
            event=event,
            layout_start=event.start_time,
            layout_end=event.end_time,
        )

    @property
    def width(self) -> float:
        return 1 / self.position


class DisplayAllDayEvent(BaseModel):
    """Entry of the day view all-day lane."""

    model_config = ConfigDict(frozen=True)

    event: Event


class MonthViewRow(BaseModel):
    """One cell of the month grid."""

    model_config = ConfigDict(frozen=True)

    date: date_type
    label: str
    events: list[Event] = Field(default_factory=list)
    has_event: bool = False
    secondary: bool = False
    disabled: bool = False
    current: bool = False
    selected: bool = False


class MonthView(BaseModel):
    """Month grid, row-major, always complete weeks."""

    model_config = ConfigDict(frozen=True)

    mode: CalendarMode = CalendarMode.MONTH
    range: Range
    dates: list[MonthViewRow]
    day_headers: list[str]

    def rows(self) -> list[list[MonthViewRow]]:
        """Cells grouped by week."""
        return [self.dates[i : i + 7] for i in range(0, len(self.dates), 7)]

    def cell(self, day: date_type) -> MonthViewRow | None:
        for row in self.dates:
            if row.date == day:
                return row
        return None


class WeekViewDateRow(BaseModel):
    """All-day lane of one week view day column."""

    model_config = ConfigDict(frozen=True)

    date: date_type
    events: list[DisplayEvent] = Field(default_factory=list)
    disabled: bool = False


class WeekViewRow(BaseModel):
    """One slot of one week view day column."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    events: list[DisplayEvent] = Field(default_factory=list)


class WeekView(BaseModel):
    """Week grid; ``rows[slot][day]``."""

    model_config = ConfigDict(frozen=True)

    mode: CalendarMode = CalendarMode.WEEK
    range: Range
    dates: list[WeekViewDateRow]
    day_headers: list[str]
    rows: list[list[WeekViewRow]]

    def column(self, day_index: int) -> list[WeekViewRow]:
        """Slot rows of a single day column."""
        return [row[day_index] for row in self.rows]


class DayViewRow(BaseModel):
    """One slot of the day view."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    events: list[DisplayEvent] = Field(default_factory=list)


class DayView(BaseModel):
    """Day grid with a separate all-day lane."""

    model_config = ConfigDict(frozen=True)

    mode: CalendarMode = CalendarMode.DAY
    range: Range
    day_headers: list[str] = Field(default_factory=list)
    all_day_events: list[DisplayAllDayEvent] = Field(default_factory=list)
    rows: list[DayViewRow]


View = MonthView | WeekView | DayView


class TimeSelected(BaseModel):
    """Selection answer for a cell."""

    model_config = ConfigDict(frozen=True)

    selected_time: datetime
    events: list[Event] = Field(default_factory=list)
    disabled: bool = False
