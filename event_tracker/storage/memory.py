"""In-memory event store."""
import uuid
from uuid import UUID

import structlog

from .base import EventStore
from .locks import ReadWriteLock
from ..errors import EventNotFound, StorageError
from ..filtering import filter_events
from ..models import Event, EventDraft, EventQuery

log = structlog.get_logger()


class InMemoryEventStore(EventStore):
    """
    Thread-safe in-memory store keyed by event identifier.

    The mapping lives for the lifetime of the process and only grows.
    ``get``/``list_events``/``count`` share a read lock and may run
    concurrently; ``insert`` holds the write lock exclusively.

    Stored events are private copies: callers get their own copy on every
    read, so nothing outside the store can change what is stored.
    """

    def __init__(self):
        self._events: dict[UUID, Event] = {}
        self._lock = ReadWriteLock()

    def insert(self, draft: EventDraft) -> Event:
        try:
            event = Event.from_draft(draft, uuid.uuid4()).model_copy(deep=True)
            with self._lock.write_locked():
                while event.id in self._events:
                    event = event.model_copy(update={"id": uuid.uuid4()})
                self._events[event.id] = event
                total = len(self._events)
        except MemoryError as e:
            log.error("event.store_failed", error_type=type(e).__name__, adapter="memory")
            raise StorageError("in-memory store exhausted") from e

        log.info(
            "event.stored",
            id=str(event.id),
            event_type=event.event_type,
            total_events=total,
            adapter="memory",
        )
        return event.model_copy(deep=True)

    def get(self, event_id: UUID) -> Event:
        log.debug("event.lookup", id=str(event_id))
        with self._lock.read_locked():
            event = self._events.get(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event.model_copy(deep=True)

    def list_events(self, query: EventQuery) -> list[Event]:
        with self._lock.read_locked():
            results = filter_events(self._events.values(), query)
        log.debug(
            "event.query",
            event_type=query.event_type,
            start=query.start.isoformat() if query.start else None,
            end=query.end.isoformat() if query.end else None,
            results=len(results),
        )
        return [event.model_copy(deep=True) for event in results]

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._events)

    def __len__(self) -> int:
        return self.count()

    def health_check(self) -> bool:
        """In-memory store is always healthy."""
        return True
