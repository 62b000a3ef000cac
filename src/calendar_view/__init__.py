"""Calendar view-model engine: ranges, grids, overlap lanes and selection."""

from src.calendar_view.config import CalendarConfig
from src.calendar_view.date_range import adjacent_date, compute_range
from src.calendar_view.engine import CalendarEngine
from src.calendar_view.exceptions import (
    CalendarError,
    ConfigurationError,
    SelectionError,
    ValidationError,
)
from src.calendar_view.formatter import DateFormatter
from src.calendar_view.ingest import IngestResult, ingest_events
from src.calendar_view.models import (
    CalendarMode,
    DayView,
    DayViewRow,
    DisplayAllDayEvent,
    DisplayEvent,
    Event,
    MonthView,
    MonthViewRow,
    QueryMode,
    Range,
    Step,
    TimeSelected,
    View,
    WeekView,
    WeekViewDateRow,
    WeekViewRow,
)
from src.calendar_view.notifier import RangeChangeNotifier, Signal
from src.calendar_view.overlap import assign_lanes
from src.calendar_view.selection import SelectionModel, detail_lines
from src.calendar_view.view_builder import build, hour_column

__all__ = [
    "CalendarConfig",
    "CalendarEngine",
    "CalendarError",
    "CalendarMode",
    "ConfigurationError",
    "DateFormatter",
    "DayView",
    "DayViewRow",
    "DisplayAllDayEvent",
    "DisplayEvent",
    "Event",
    "IngestResult",
    "MonthView",
    "MonthViewRow",
    "QueryMode",
    "Range",
    "RangeChangeNotifier",
    "SelectionError",
    "SelectionModel",
    "Signal",
    "Step",
    "TimeSelected",
    "ValidationError",
    "View",
    "WeekView",
    "WeekViewDateRow",
    "WeekViewRow",
    "adjacent_date",
    "assign_lanes",
    "build",
    "compute_range",
    "detail_lines",
    "hour_column",
    "ingest_events",
]
