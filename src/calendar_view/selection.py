"""Selected cell tracking and the detail-panel answer for a cell."""

from datetime import date, datetime, timedelta

from src.calendar_view.config import CalendarConfig
from src.calendar_view.date_range import at_hour
from src.calendar_view.exceptions import SelectionError
from src.calendar_view.models import DayView, MonthView, TimeSelected, View, WeekView
from src.utils.mixins import LoggerMixin


def _cell_day(cell: date | datetime) -> date:
    return cell.date() if isinstance(cell, datetime) else cell


def resolve_cell(
    cell: date | datetime, view: View, config: CalendarConfig
) -> TimeSelected | None:
    """Answer for ``cell`` in ``view``, or ``None`` when the cell is not shown.

    Month cells are whole days. Day/week cells are slots; the selected time
    snaps to the slot start and a bare date means the first slot of that day.
    """
    tz = view.range.start_time.tzinfo
    day = _cell_day(cell)

    if isinstance(view, MonthView):
        row = view.cell(day)
        if row is None:
            return None
        return TimeSelected(
            selected_time=at_hour(day, 0, tz),
            events=row.events,
            disabled=row.disabled,
        )

    if isinstance(view, WeekView):
        days = [date_row.date for date_row in view.dates]
        if day not in days:
            return None
        column = view.column(days.index(day))
    elif isinstance(view, DayView):
        if not view.rows or view.rows[0].time.date() != day:
            return None
        column = view.rows
    else:
        raise TypeError(f"Unsupported view type: {type(view).__name__}")

    instant = cell if isinstance(cell, datetime) else at_hour(day, config.start_hour, tz)
    column_start = column[0].time
    slot = timedelta(minutes=config.step)
    if instant < column_start:
        return None
    index = (instant - column_start) // slot
    if index >= len(column):
        return None

    row = column[index]
    return TimeSelected(
        selected_time=row.time,
        events=[display_event.event for display_event in row.events],
        disabled=config.is_disabled(day),
    )


class SelectionModel(LoggerMixin):
    """Holds the single, nullable, current selection."""

    def __init__(self, auto_select: bool = True):
        self.auto_select = auto_select
        self.current: TimeSelected | None = None

    @property
    def selected_date(self) -> date | None:
        if self.current is None:
            return None
        return self.current.selected_time.date()

    def clear(self) -> None:
        self.current = None

    def select(
        self, cell: date | datetime, view: View, config: CalendarConfig
    ) -> TimeSelected:
        """Select ``cell``.

        Disabled or unseen cells raise :class:`SelectionError` unless
        auto-selection is on, in which case the call leaves the selection
        untouched and returns the (disabled) answer for the cell.
        """
        answer = resolve_cell(cell, view, config)

        if answer is None or answer.disabled:
            reason = "outside the visible range" if answer is None else "disabled"
            if not self.auto_select:
                raise SelectionError(
                    f"Cell {cell} is {reason}", cell=cell, disabled=answer is not None
                )
            self.logger.info("Selection ignored", cell=str(cell), reason=reason)
            if answer is None:
                tz = view.range.start_time.tzinfo
                instant = cell if isinstance(cell, datetime) else at_hour(cell, 0, tz)
                answer = TimeSelected(selected_time=instant, events=[], disabled=True)
            return answer

        self.current = answer
        self.logger.info(
            "Cell selected",
            selected_time=answer.selected_time.isoformat(),
            events=len(answer.events),
        )
        return answer

    def auto_select_month(self, view: MonthView, reference: date) -> TimeSelected | None:
        """Select the reference day, or the month's first selectable day."""
        in_month = [row for row in view.dates if not row.secondary]
        chosen = next(
            (row for row in in_month if row.date == reference and not row.disabled),
            None,
        )
        if chosen is None:
            chosen = next((row for row in in_month if not row.disabled), None)

        if chosen is None:
            self.current = None
            self.logger.info("No selectable day in month", month=reference.isoformat())
            return None

        self.current = TimeSelected(
            selected_time=at_hour(chosen.date, 0, view.range.start_time.tzinfo),
            events=chosen.events,
            disabled=False,
        )
        return self.current

    def refresh(self, view: View, config: CalendarConfig) -> TimeSelected | None:
        """Re-derive the current selection's events after a rebuild.

        A selection that is no longer shown is kept as is.
        """
        if self.current is None:
            return None
        answer = resolve_cell(self.current.selected_time, view, config)
        if answer is not None:
            self.current = answer
        return self.current


def detail_lines(selection: TimeSelected | None, config: CalendarConfig) -> list[str]:
    """Lines of the detail panel listing the selected cell's events.

    Empty when the panel is hidden or nothing is selected.
    """
    if not config.show_event_detail or selection is None:
        return []
    if not selection.events:
        return [config.no_events_label]

    lines = []
    for event in selection.events:
        if event.all_day:
            lines.append(f"{config.all_day_label} {event.title}")
        else:
            lines.append(
                f"{event.start_time:%H:%M} - {event.end_time:%H:%M} {event.title}"
            )
    return lines
