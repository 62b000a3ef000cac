"""Default title and label formatter.

The engine only hands canonical dates to the formatter; hosts needing
locale-aware text subclass :class:`DateFormatter` and override the methods
they care about.
"""

from datetime import date, datetime, timedelta


class DateFormatter:
    """English labels close to the usual calendar widget defaults."""

    def format_month_view_day(self, day: date) -> str:
        return str(day.day)

    def format_month_view_day_header(self, day: date) -> str:
        return day.strftime("%a")

    def format_month_view_title(self, day: date) -> str:
        return day.strftime("%B %Y")

    def format_week_view_day_header(self, day: date) -> str:
        return f"{day.strftime('%a')} {day.day}"

    def format_week_view_title(self, first_day: date) -> str:
        # mid-week day so Sunday-started weeks report the ISO week they mostly cover
        week_number = (first_day + timedelta(days=3)).isocalendar()[1]
        return f"{first_day.strftime('%B %Y')}, Week {week_number}"

    def format_week_view_hour_column(self, slot: datetime) -> str:
        return self._hour_label(slot)

    def format_day_view_title(self, day: date) -> str:
        return day.strftime("%B %d, %Y")

    def format_day_view_hour_column(self, slot: datetime) -> str:
        return self._hour_label(slot)

    @staticmethod
    def _hour_label(slot: datetime) -> str:
        hour = slot.hour % 12 or 12
        suffix = "AM" if slot.hour < 12 else "PM"
        if slot.minute:
            return f"{hour}:{slot.minute:02d}{suffix}"
        return f"{hour}{suffix}"
