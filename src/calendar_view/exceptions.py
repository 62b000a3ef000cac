"""Calendar engine error taxonomy."""


class CalendarError(Exception):
    """Base class for calendar engine errors."""


class ConfigurationError(CalendarError):
    """Invalid step, hour bounds or week start.

    Raised as soon as the configuration is assembled; values are never clamped.
    """

    def __init__(self, message: str, field: str | None = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


class SelectionError(CalendarError):
    """Selection of a disabled or out-of-view cell."""

    def __init__(self, message: str, cell: object = None, disabled: bool = False):
        super().__init__(message)
        self.cell = cell
        self.disabled = disabled


class ValidationError(CalendarError):
    """Malformed event rejected at ingestion."""

    def __init__(self, message: str, identifier: str | None = None, index: int = -1):
        super().__init__(message)
        self.identifier = identifier
        self.index = index
