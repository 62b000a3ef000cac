"""Lane assignment for overlapping events in one grid column."""

from collections.abc import Sequence
from datetime import datetime

from structlog import get_logger

from src.calendar_view.models import DisplayEvent, Event

logger = get_logger(__name__)


def assign_lanes(events: Sequence[Event | DisplayEvent]) -> list[DisplayEvent]:
    """Assign a lane and a lane count to every event of a column.

    Greedy interval colouring over the layout interval of each event: events
    are visited by start, then end, then input order; lanes whose occupant
    ended at or before the visited start are released and the lowest free lane
    is taken. ``position`` is the number of lanes used by the event's overlap
    group (events chained together by overlaps), so events that never overlap
    anything keep full width.

    The result is in input order.
    """
    items = [
        item if isinstance(item, DisplayEvent) else DisplayEvent.for_event(item)
        for item in events
    ]
    if not items:
        return []

    order = sorted(
        range(len(items)),
        key=lambda i: (items[i].layout_start, items[i].layout_end, i),
    )

    lanes: list[datetime | None] = []
    lane_of = [0] * len(items)
    group_of = [0] * len(items)
    group_lanes: list[int] = []

    for index in order:
        item = items[index]
        for lane, occupied_until in enumerate(lanes):
            if occupied_until is not None and occupied_until <= item.layout_start:
                lanes[lane] = None

        # all lanes free: nothing active overlaps, so a new group starts here
        if all(occupied_until is None for occupied_until in lanes):
            group_lanes.append(0)

        free = next(
            (lane for lane, occupied_until in enumerate(lanes) if occupied_until is None),
            None,
        )
        if free is None:
            lanes.append(None)
            free = len(lanes) - 1

        lanes[free] = item.layout_end
        lane_of[index] = free
        group_of[index] = len(group_lanes) - 1
        group_lanes[-1] = max(group_lanes[-1], free + 1)

    logger.debug(
        "Lanes assigned",
        events=len(items),
        groups=len(group_lanes),
        lanes=max(group_lanes),
    )

    return [
        item.model_copy(
            update={
                "overlap_number": lane_of[i],
                "position": group_lanes[group_of[i]],
            }
        )
        for i, item in enumerate(items)
    ]


def max_concurrency(events: Sequence[Event | DisplayEvent]) -> int:
    """Largest number of layout intervals sharing one instant."""
    points: list[tuple[datetime, int]] = []
    for item in events:
        if isinstance(item, Event):
            item = DisplayEvent.for_event(item)
        if item.layout_start == item.layout_end:
            continue
        points.append((item.layout_start, 1))
        points.append((item.layout_end, -1))

    # ends sort before starts at the same instant, intervals are half-open
    points.sort(key=lambda point: (point[0], point[1]))
    current = best = 0
    for _, delta in points:
        current += delta
        best = max(best, current)
    return best
