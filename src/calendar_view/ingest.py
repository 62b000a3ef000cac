"""Event source ingestion with per-event rejection."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from structlog import get_logger

from src.calendar_view.exceptions import ValidationError
from src.calendar_view.models import Event

logger = get_logger(__name__)


@dataclass
class IngestResult:
    """Accepted events plus the rejections of one ingestion."""

    events: list[Event] = field(default_factory=list)
    rejected: list[ValidationError] = field(default_factory=list)


def _identifier(item: Any) -> str | None:
    if isinstance(item, Mapping):
        value = item.get("identifier")
    else:
        value = getattr(item, "identifier", None)
    return None if value is None else str(value)


def to_event(item: Event | Mapping[str, Any] | Any) -> Event:
    """Coerce a host value (model, mapping or attribute object) to an Event."""
    if isinstance(item, Event):
        # instances built with model_construct skip validation
        if item.start_time > item.end_time:
            raise ValueError("Event start_time cannot be after end_time")
        return item
    return Event.model_validate(item, from_attributes=not isinstance(item, Mapping))


def ingest_events(
    source: Iterable[Any] | None, aware: bool | None = None
) -> IngestResult:
    """Validate an event source.

    A malformed event is excluded and recorded as a :class:`ValidationError`;
    the remaining events are kept so one bad event never blanks the calendar.
    All accepted events share one kind of timestamp: timezone-aware when
    ``aware`` is true, naive when false, and like the first accepted event
    when ``None``.
    """
    result = IngestResult()
    for index, item in enumerate(source or ()):
        try:
            event = to_event(item)
            if aware is not None and event.is_aware != aware:
                expected = "timezone-aware" if aware else "naive"
                raise ValueError(f"Event times must be {expected} like the calendar")
        except (ValueError, TypeError) as e:
            error = ValidationError(str(e), identifier=_identifier(item), index=index)
            logger.warning(
                "Event rejected",
                index=index,
                identifier=error.identifier,
                error=str(e),
            )
            result.rejected.append(error)
            continue
        if aware is None:
            aware = event.is_aware
        result.events.append(event)

    logger.debug(
        "Events ingested",
        accepted=len(result.events),
        rejected=len(result.rejected),
    )
    return result
