"""Build month, week and day grids from a list of events."""

from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from structlog import get_logger

from src.calendar_view.config import CalendarConfig, check_step, check_week_start
from src.calendar_view.date_range import (
    DAYS_PER_WEEK,
    at_hour,
    month_grid_dates,
)
from src.calendar_view.models import (
    CalendarMode,
    DayView,
    DayViewRow,
    DisplayAllDayEvent,
    DisplayEvent,
    Event,
    MonthView,
    MonthViewRow,
    Range,
    View,
    WeekView,
    WeekViewDateRow,
    WeekViewRow,
)
from src.calendar_view.overlap import assign_lanes

logger = get_logger(__name__)


def _sort_key(event: Event) -> tuple[bool, datetime, datetime]:
    return (not event.all_day, event.start_time, event.end_time)


def build(
    events: Sequence[Event],
    view_range: Range,
    mode: CalendarMode | str,
    config: CalendarConfig,
    selected_date: date | None = None,
    today: date | None = None,
) -> View:
    """Build the view snapshot for ``mode`` over ``view_range``."""
    check_step(config.step)
    check_week_start(config.week_start_offset)

    mode = CalendarMode(mode)
    if mode == CalendarMode.MONTH:
        view: View = build_month_view(events, view_range, config, selected_date, today)
    elif mode == CalendarMode.WEEK:
        view = build_week_view(events, view_range, config)
    else:
        view = build_day_view(events, view_range, config)

    logger.debug(
        "View built",
        mode=mode.value,
        events=len(events),
        start=view_range.start_time.isoformat(),
        end=view_range.end_time.isoformat(),
    )
    return view


def bucket_by_date(
    events: Sequence[Event], first: date, last: date
) -> dict[date, list[Event]]:
    """Map each date in ``[first, last]`` to the events touching it.

    Timed events touch every day their interval intersects; all-day events
    touch the dates they cover. Both reduce to the event's covered dates.
    """
    buckets: dict[date, list[Event]] = defaultdict(list)
    for event in sorted(events, key=_sort_key):
        day = max(event.first_date(), first)
        end = min(event.last_date(), last)
        while day <= end:
            buckets[day].append(event)
            day += timedelta(days=1)
    return buckets


def build_month_view(
    events: Sequence[Event],
    view_range: Range,
    config: CalendarConfig,
    selected_date: date | None = None,
    today: date | None = None,
) -> MonthView:
    """Fixed 6x7 grid covering the month plus neighbouring days."""
    month_start = view_range.start_time.date()
    grid = month_grid_dates(month_start, config.week_start_offset)
    buckets = bucket_by_date(events, grid[0], grid[-1])
    formatter = config.formatter

    dates = []
    for day in grid:
        cell_events = buckets.get(day, [])
        dates.append(
            MonthViewRow(
                date=day,
                label=formatter.format_month_view_day(day),
                events=cell_events,
                has_event=bool(cell_events),
                secondary=day.month != month_start.month,
                disabled=config.is_disabled(day),
                current=day == today,
                selected=day == selected_date,
            )
        )

    return MonthView(
        range=view_range,
        dates=dates,
        day_headers=[
            formatter.format_month_view_day_header(day) for day in grid[:DAYS_PER_WEEK]
        ],
    )


def layout_timed_event(
    event: Event, column_start: datetime, column_end: datetime, slot: timedelta
) -> DisplayEvent | None:
    """Position a timed event inside one day column, clipped to the column.

    Returns ``None`` when the event does not touch the column.
    """
    if not event.intersects(column_start, column_end):
        return None

    layout_start = max(event.start_time, column_start)
    start_index, start_rest = divmod(layout_start - column_start, slot)
    start_offset = start_rest / slot if start_rest else None

    if event.is_zero_length:
        end_index = start_index + 1
        end_offset = None
        layout_end = column_start + slot * end_index
    else:
        layout_end = min(event.end_time, column_end)
        end_index, end_rest = divmod(layout_end - column_start, slot)
        end_offset = None
        if end_rest:
            end_index += 1
            end_offset = (slot - end_rest) / slot

    return DisplayEvent(
        event=event,
        start_index=start_index,
        end_index=end_index,
        start_offset=start_offset,
        end_offset=end_offset,
        layout_start=layout_start,
        layout_end=layout_end,
    )


def layout_column(
    events: Sequence[Event], day: date, config: CalendarConfig, tz: tzinfo | None = None
) -> tuple[list[datetime], list[list[DisplayEvent]]]:
    """Slot start times and per-slot display events for one day column."""
    slot = timedelta(minutes=config.step)
    column_start = at_hour(day, config.start_hour, tz)
    column_end = at_hour(day, config.end_hour, tz)

    placed = []
    for event in sorted(events, key=_sort_key):
        if event.all_day:
            continue
        display_event = layout_timed_event(event, column_start, column_end, slot)
        if display_event is not None:
            placed.append(display_event)

    times = [column_start + slot * i for i in range(config.slots_per_day)]
    rows: list[list[DisplayEvent]] = [[] for _ in times]
    for display_event in assign_lanes(placed):
        for index in range(display_event.start_index, display_event.end_index):
            rows[index].append(display_event)
    return times, rows


def layout_all_day_lane(
    events: Sequence[Event], first: date, days: int, tz: tzinfo | None = None
) -> list[list[DisplayEvent]]:
    """All-day events of a multi-day lane, laned across day columns."""
    last = first + timedelta(days=days - 1)
    placed = []
    for event in sorted(events, key=_sort_key):
        if not event.all_day:
            continue
        start_day = max(event.first_date(), first)
        end_day = min(event.last_date(), last)
        if start_day > end_day:
            continue
        placed.append(
            DisplayEvent(
                event=event,
                start_index=(start_day - first).days,
                end_index=(end_day - first).days + 1,
                layout_start=at_hour(start_day, 0, tz),
                layout_end=at_hour(end_day, 24, tz),
            )
        )

    columns: list[list[DisplayEvent]] = [[] for _ in range(days)]
    for display_event in assign_lanes(placed):
        for index in range(display_event.start_index, display_event.end_index):
            columns[index].append(display_event)
    return columns


def build_week_view(
    events: Sequence[Event], view_range: Range, config: CalendarConfig
) -> WeekView:
    """Seven day columns of slot rows plus an all-day lane."""
    tz = view_range.start_time.tzinfo
    first = view_range.start_time.date()
    days = [first + timedelta(days=i) for i in range(DAYS_PER_WEEK)]

    all_day = layout_all_day_lane(events, first, DAYS_PER_WEEK, tz)
    columns = [layout_column(events, day, config, tz) for day in days]

    rows = [
        [
            WeekViewRow(time=columns[d][0][slot], events=columns[d][1][slot])
            for d in range(DAYS_PER_WEEK)
        ]
        for slot in range(config.slots_per_day)
    ]

    return WeekView(
        range=view_range,
        dates=[
            WeekViewDateRow(date=day, events=all_day[i], disabled=config.is_disabled(day))
            for i, day in enumerate(days)
        ],
        day_headers=[config.formatter.format_week_view_day_header(day) for day in days],
        rows=rows,
    )


def build_day_view(
    events: Sequence[Event], view_range: Range, config: CalendarConfig
) -> DayView:
    """Slot rows of a single day plus its all-day events."""
    tz = view_range.start_time.tzinfo
    day = view_range.start_time.date()
    times, slots = layout_column(events, day, config, tz)

    return DayView(
        range=view_range,
        day_headers=[config.formatter.format_week_view_day_header(day)],
        all_day_events=[
            DisplayAllDayEvent(event=event)
            for event in sorted(events, key=_sort_key)
            if event.all_day and event.covers_date(day)
        ],
        rows=[DayViewRow(time=time, events=slot) for time, slot in zip(times, slots)],
    )


def mark_selected(view: View, selected_date: date | None) -> View:
    """Copy of a month view whose ``selected`` flags follow ``selected_date``."""
    if not isinstance(view, MonthView):
        return view
    if all(row.selected == (row.date == selected_date) for row in view.dates):
        return view
    return view.model_copy(
        update={
            "dates": [
                row.model_copy(update={"selected": row.date == selected_date})
                for row in view.dates
            ]
        }
    )


def hour_column(view: View, config: CalendarConfig) -> list[str]:
    """Labels of the slot rows of a day or week view; empty for month views."""
    formatter = config.formatter
    if isinstance(view, WeekView):
        return [formatter.format_week_view_hour_column(row[0].time) for row in view.rows]
    if isinstance(view, DayView):
        return [formatter.format_day_view_hour_column(row.time) for row in view.rows]
    return []
