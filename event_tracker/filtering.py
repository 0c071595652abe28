"""Query/filter engine applied by stores during listing.

An event matches a query when every condition the query sets holds:

- ``event_type``: exact, case-sensitive equality
- ``start``: event timestamp >= start (inclusive)
- ``end``: event timestamp <= end (inclusive)

Unset conditions match anything, so an empty query selects every event.
A query whose ``start`` is after its ``end`` selects nothing; it is not
an error.
"""
from typing import Iterable

from .models import Event, EventQuery


def matches(event: Event, query: EventQuery) -> bool:
    """Return True if ``event`` satisfies every condition set on ``query``."""
    if query.event_type is not None and event.event_type != query.event_type:
        return False
    if query.start is not None and event.timestamp < query.start:
        return False
    if query.end is not None and event.timestamp > query.end:
        return False
    return True


def filter_events(events: Iterable[Event], query: EventQuery) -> list[Event]:
    """
    Select the events matching ``query``.

    Full scan, no pagination and no ordering guarantee beyond that of
    ``events`` itself.
    """
    if query.is_empty_range:
        return []
    return [event for event in events if matches(event, query)]
