"""Calendar engine façade.

Every input change (reference date, mode, configuration, event source)
recomputes range, view and selection wholesale and then notifies observers
synchronously, in registration order:

1. ``on_current_date_changed(date)`` when the reference date moved
2. ``on_range_changed(range)`` / ``on_title_changed(title)`` on differences
3. ``on_view_changed(view)`` after every build
4. ``on_time_selected(selection)`` when the selection changed

Grid instants carry the time zone of the reference date when it is given as
a datetime; otherwise the time zone of the first accepted event.
"""

from collections.abc import Callable, Sequence
from datetime import date, datetime, tzinfo
from typing import Any

from src.calendar_view.config import CalendarConfig, EventLoader
from src.calendar_view.date_range import adjacent_date, at_hour, compute_range
from src.calendar_view.exceptions import SelectionError, ValidationError
from src.calendar_view.ingest import IngestResult, ingest_events, to_event
from src.calendar_view.models import (
    CalendarMode,
    Event,
    MonthView,
    QueryMode,
    Range,
    TimeSelected,
    View,
)
from src.calendar_view.notifier import RangeChangeNotifier, Signal
from src.calendar_view.selection import SelectionModel
from src.calendar_view.view_builder import build, mark_selected
from src.config import get_settings
from src.utils.mixins import LoggerMixin


def parse_cell(value: date | datetime | str) -> date | datetime:
    """Parse an ISO string; date-only strings stay dates."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if "T" in text or " " in text:
        return datetime.fromisoformat(text)
    return date.fromisoformat(text)


def as_date(value: date | datetime | str) -> date:
    """Normalize a reference date given as date, datetime or ISO string."""
    value = parse_cell(value)
    if isinstance(value, datetime):
        return value.date()
    return value


class CalendarEngine(LoggerMixin):
    """Owns the current view and selection of one calendar."""

    def __init__(
        self,
        config: CalendarConfig | None = None,
        event_source: Sequence[Any] | None = None,
        reference_date: date | datetime | str | None = None,
        loader: EventLoader | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._config = config or CalendarConfig.from_settings(get_settings())
        self._today = today
        # fixed by a datetime reference, else follows the events
        self._tz: tzinfo | None = None
        self._tz_pinned = False
        self._reference = (
            self._adopt_reference(reference_date)
            if reference_date is not None
            else today()
        )
        self._source: Sequence[Any] = event_source if event_source is not None else []
        self._ingest = IngestResult()
        self.loader = loader

        self._selection = SelectionModel(auto_select=self._config.auto_select)
        self._notifier = RangeChangeNotifier()
        self.on_range_changed = self._notifier.on_range_changed
        self.on_title_changed = self._notifier.on_title_changed
        self.on_time_selected = Signal("time_selected")
        self.on_event_selected = Signal("event_selected")
        self.on_current_date_changed = Signal("current_date_changed")
        self.on_view_changed = Signal("view_changed")

        self._ingest_source()
        self._range: Range | None = None
        self._view: View
        self._refresh(reselect=True)

    @property
    def config(self) -> CalendarConfig:
        return self._config

    @property
    def mode(self) -> CalendarMode:
        return self._config.mode

    @property
    def reference_date(self) -> date:
        return self._reference

    @property
    def tz(self) -> tzinfo | None:
        """Time zone of the grid instants; ``None`` for naive calendars."""
        return self._tz

    @property
    def range(self) -> Range:
        return self._view.range

    @property
    def view(self) -> View:
        return self._view

    @property
    def title(self) -> str:
        return self._notifier.title or ""

    @property
    def selection(self) -> TimeSelected | None:
        return self._selection.current

    @property
    def events(self) -> list[Event]:
        """Accepted events of the current source."""
        return list(self._ingest.events)

    @property
    def rejected_events(self) -> list[ValidationError]:
        """Rejections of the last ingestion."""
        return list(self._ingest.rejected)

    def set_reference_date(self, value: date | datetime | str | None = None) -> None:
        """Move the calendar to ``value`` (today when ``None``).

        A datetime value also fixes the calendar's time zone to its ``tzinfo``.
        """
        previous_tz = self._tz
        day = self._adopt_reference(value) if value is not None else self._today()
        if self._tz_pinned and self._tz != previous_tz:
            self._selection.clear()
            self._ingest_source()

        if day != self._reference:
            self._reference = day
            self.logger.info("Current date changed", current_date=day.isoformat())
            self.on_current_date_changed.emit(day)
        self._refresh(reselect=True)

    def set_mode(self, mode: CalendarMode | str) -> None:
        self.update("mode", mode)

    def set_event_source(self, event_source: Sequence[Any] | None) -> None:
        """Replace the event source and rebuild the current page."""
        self._source = event_source if event_source is not None else []
        self._ingest_source()
        self._refresh(reselect=False)

    def update(self, field: str, value: Any) -> None:
        """Explicit entry point for every host-side option change.

        Configuration fields are validated first; on
        :class:`~src.calendar_view.exceptions.ConfigurationError` the engine
        keeps its previous state.
        """
        if field == "reference_date":
            self.set_reference_date(value)
            return
        if field == "event_source":
            self.set_event_source(value)
            return
        if field == "loader":
            self.loader = value
            return

        self._config = self._config.replace(**{field: value})
        self._selection.auto_select = self._config.auto_select
        self.logger.info(
            "Configuration updated",
            field=field,
            value=value if isinstance(value, str | int | bool) else type(value).__name__,
        )
        self._refresh(reselect=True)

    def next(self) -> None:
        """Page forward one month, week or day."""
        self.set_reference_date(adjacent_date(self._reference, self.mode, 1))

    def previous(self) -> None:
        """Page back one month, week or day."""
        self.set_reference_date(adjacent_date(self._reference, self.mode, -1))

    def load_events(self) -> None:
        """Reload events for the current range.

        Remote query mode asks the loader; local mode re-reads the event source
        the host handed over (it may have been filled in place).
        """
        if self._config.query_mode == QueryMode.REMOTE:
            if self.loader is None:
                self.logger.warning("Remote query mode without an event loader")
                return
            self._load_remote(self.loader, self.range)
        else:
            self._ingest_source()
        self._refresh(reselect=False)

    def select_cell(self, cell: date | datetime | str) -> TimeSelected:
        """Select a day (month view) or slot (day/week view).

        Date-only cells mean the whole day in month views and the first slot
        in day/week views. Selecting an adjacent-month cell first pages to
        that month.
        """
        cell = self._localize(parse_cell(cell))

        if isinstance(self._view, MonthView):
            row = self._view.cell(as_date(cell))
            if row is not None and row.secondary and not row.disabled:
                self.set_reference_date(row.date)

        previous = self._selection.current
        result = self._selection.select(cell, self._view, self._config)
        if self._selection.current is not result:
            return result

        day = result.selected_time.date()
        if day != self._reference:
            self._reference = day
            self.on_current_date_changed.emit(day)

        if result != previous:
            self._view = mark_selected(self._view, self._selection.selected_date)
            self.on_view_changed.emit(self._view)
            self.on_time_selected.emit(result)
        return result

    def select_event(self, event: Event | dict[str, Any]) -> Event:
        """Forward an event picked in the presentation layer to observers."""
        selected = to_event(event)
        self.logger.info("Event selected", identifier=selected.identifier)
        self.on_event_selected.emit(selected)
        return selected

    def _adopt_reference(self, value: date | datetime | str) -> date:
        value = parse_cell(value)
        if isinstance(value, datetime):
            self._tz = value.tzinfo
            self._tz_pinned = True
            return value.date()
        return value

    def _localize(self, cell: date | datetime) -> date | datetime:
        if not isinstance(cell, datetime):
            return cell
        if cell.tzinfo is None:
            return cell.replace(tzinfo=self._tz)
        if self._tz is None:
            raise SelectionError(
                f"Cell {cell} is timezone-aware but the calendar is naive", cell=cell
            )
        return cell.astimezone(self._tz)

    def _ingest_source(self) -> None:
        """Validate the event source against the calendar's time zone."""
        aware = (self._tz is not None) if self._tz_pinned else None
        self._ingest = ingest_events(self._source, aware=aware)
        if self._tz_pinned:
            return

        tz = next((event.start_time.tzinfo for event in self._ingest.events), None)
        if tz != self._tz:
            self._tz = tz
            self._selection.clear()

    def _load_remote(self, loader: EventLoader, view_range: Range) -> None:
        self._source = list(loader(view_range))
        self._ingest_source()
        self.logger.info(
            "Events loaded",
            start=view_range.start_time.isoformat(),
            end=view_range.end_time.isoformat(),
            accepted=len(self._ingest.events),
            rejected=len(self._ingest.rejected),
        )

    def _compute_range(self) -> Range:
        config = self._config
        return compute_range(
            at_hour(self._reference, 0, self._tz),
            config.mode,
            config.week_start_offset,
            (config.start_hour, config.end_hour),
        )

    def _refresh(self, reselect: bool) -> None:
        config = self._config
        new_range = self._compute_range()
        range_changed = new_range != self._range

        if (
            range_changed
            and config.query_mode == QueryMode.REMOTE
            and self.loader is not None
        ):
            tz = self._tz
            self._load_remote(self.loader, new_range)
            if self._tz != tz:
                new_range = self._compute_range()

        previous = self._selection.current
        view = build(self._ingest.events, new_range, config.mode, config, today=self._today())

        if reselect and config.auto_select and isinstance(view, MonthView):
            self._selection.auto_select_month(view, self._reference)
        else:
            self._selection.refresh(view, config)

        view = mark_selected(view, self._selection.selected_date)
        self._range, self._view = new_range, view

        self._notifier.publish(new_range, config.mode, config.formatter)
        self.on_view_changed.emit(view)
        current = self._selection.current
        if current is not None and current != previous:
            self.on_time_selected.emit(current)
