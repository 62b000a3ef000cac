"""Visible range arithmetic for day, week and month modes."""

from datetime import date, datetime, time, timedelta, tzinfo

from src.calendar_view.config import check_hour_bounds, check_week_start
from src.calendar_view.models import CalendarMode, Range

DAYS_PER_WEEK = 7
MONTH_GRID_WEEKS = 6


def _tz(reference: date | datetime) -> tzinfo | None:
    return reference.tzinfo if isinstance(reference, datetime) else None


def _day(reference: date | datetime) -> date:
    return reference.date() if isinstance(reference, datetime) else reference


def at_hour(day: date, hour: int, tz: tzinfo | None = None) -> datetime:
    """Instant ``hour`` hours into ``day``; hour 24 is the next midnight."""
    return datetime.combine(day, time.min, tzinfo=tz) + timedelta(hours=hour)


def weekday_index(day: date) -> int:
    """Weekday with Sunday as 0, matching ``week_start_offset``."""
    return (day.weekday() + 1) % DAYS_PER_WEEK


def week_start(reference: date | datetime, week_start_offset: int = 0) -> date:
    """First day of the week containing ``reference``."""
    check_week_start(week_start_offset)
    day = _day(reference)
    return day - timedelta(days=(weekday_index(day) - week_start_offset) % DAYS_PER_WEEK)


def first_of_month(reference: date | datetime) -> date:
    return _day(reference).replace(day=1)


def first_of_next_month(reference: date | datetime) -> date:
    first = first_of_month(reference)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def month_grid_start(reference: date | datetime, week_start_offset: int = 0) -> date:
    """First cell of the month grid, on or before the 1st of the month."""
    return week_start(first_of_month(reference), week_start_offset)


def month_grid_dates(reference: date | datetime, week_start_offset: int = 0) -> list[date]:
    """All dates of the fixed 6x7 month grid."""
    start = month_grid_start(reference, week_start_offset)
    return [start + timedelta(days=i) for i in range(MONTH_GRID_WEEKS * DAYS_PER_WEEK)]


def compute_range(
    reference: date | datetime,
    mode: CalendarMode | str,
    week_start_offset: int = 0,
    hour_bounds: tuple[int, int] = (0, 24),
) -> Range:
    """Compute the half-open visible window for ``mode``.

    Pure function of its inputs; the reference's ``tzinfo`` is carried over
    without any conversion.
    """
    mode = CalendarMode(mode)
    check_week_start(week_start_offset)
    tz = _tz(reference)
    day = _day(reference)

    if mode == CalendarMode.MONTH:
        return Range(
            start_time=at_hour(first_of_month(day), 0, tz),
            end_time=at_hour(first_of_next_month(day), 0, tz),
        )

    if mode == CalendarMode.WEEK:
        first = week_start(day, week_start_offset)
        return Range(
            start_time=at_hour(first, 0, tz),
            end_time=at_hour(first + timedelta(days=DAYS_PER_WEEK), 0, tz),
        )

    start_hour, end_hour = check_hour_bounds(*hour_bounds)
    return Range(
        start_time=at_hour(day, start_hour, tz),
        end_time=at_hour(day, end_hour, tz),
    )


def adjacent_date(
    reference: date | datetime, mode: CalendarMode | str, direction: int
) -> date:
    """Reference date after moving ``direction`` pages in ``mode``.

    Month paging lands on the 1st of the target month.
    """
    mode = CalendarMode(mode)
    day = _day(reference)

    if mode == CalendarMode.MONTH:
        months = day.year * 12 + (day.month - 1) + direction
        return date(months // 12, months % 12 + 1, 1)
    if mode == CalendarMode.WEEK:
        return day + timedelta(days=DAYS_PER_WEEK * direction)
    return day + timedelta(days=direction)
