"""Synchronous observer lists and range/title change diffing."""

from collections.abc import Callable
from typing import Any

from src.calendar_view.formatter import DateFormatter
from src.calendar_view.models import CalendarMode, Range
from src.utils.mixins import LoggerMixin

Callback = Callable[..., Any]


class Signal:
    """Plain callback list invoked in registration order.

    Callback exceptions propagate to whoever triggered the emission.
    """

    def __init__(self, name: str):
        self.name = name
        self._callbacks: list[Callback] = []

    def connect(self, callback: Callback) -> Callback:
        """Register a callback; usable as a decorator."""
        self._callbacks.append(callback)
        return callback

    def disconnect(self, callback: Callback) -> bool:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        for callback in list(self._callbacks):
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, callbacks={len(self._callbacks)})"


def view_title(view_range: Range, mode: CalendarMode | str, formatter: DateFormatter) -> str:
    """Title of the page starting at ``view_range``, produced by the formatter."""
    mode = CalendarMode(mode)
    first_day = view_range.start_time.date()
    if mode == CalendarMode.MONTH:
        return formatter.format_month_view_title(first_day)
    if mode == CalendarMode.WEEK:
        return formatter.format_week_view_title(first_day)
    return formatter.format_day_view_title(first_day)


class RangeChangeNotifier(LoggerMixin):
    """Surfaces range and title only when they differ from the last ones."""

    def __init__(self) -> None:
        self.on_range_changed = Signal("range_changed")
        self.on_title_changed = Signal("title_changed")
        self.range: Range | None = None
        self.title: str | None = None

    def publish(
        self, view_range: Range, mode: CalendarMode | str, formatter: DateFormatter
    ) -> tuple[bool, bool]:
        """Record the new range/title and notify observers of differences.

        Returns ``(range_changed, title_changed)``.
        """
        title = view_title(view_range, mode, formatter)
        range_changed = view_range != self.range
        title_changed = title != self.title
        self.range = view_range
        self.title = title

        if range_changed:
            self.logger.info(
                "Range changed",
                start=view_range.start_time.isoformat(),
                end=view_range.end_time.isoformat(),
            )
            self.on_range_changed.emit(view_range)
        if title_changed:
            self.logger.debug("Title changed", title=title)
            self.on_title_changed.emit(title)

        return range_changed, title_changed
