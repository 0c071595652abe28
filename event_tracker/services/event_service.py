"""Event service: the one path from request handlers to the event store."""
from uuid import UUID

import structlog

from ..errors import NotFound
from ..metrics import Metrics
from ..models import Event, EventDraft, EventQuery
from ..storage.base import EventStore
from ..storage.memory import InMemoryEventStore

log = structlog.get_logger()


class EventService:
    """
    Delegates to an event store and records counters for each operation.

    Handlers never touch the store directly; every mutation goes through
    ``create``.
    """

    def __init__(self, store: EventStore | None = None, metrics: Metrics | None = None):
        """
        Initialize the service.

        Args:
            store: Backend store to use (defaults to a fresh in-memory store)
            metrics: Counters to update, or None to skip recording
        """
        self._store = store if store is not None else InMemoryEventStore()
        self._metrics = metrics
        if metrics is not None:
            metrics.track_store_size(self._store.count)

    @property
    def store(self) -> EventStore:
        return self._store

    def create(self, draft: EventDraft) -> Event:
        """Store a validated draft and return the stored event."""
        event = self._store.insert(draft)
        if self._metrics is not None:
            self._metrics.record_event_created()
        return event

    def list_events(self, query: EventQuery) -> list[Event]:
        """List stored events matching ``query``."""
        events = self._store.list_events(query)
        if self._metrics is not None:
            self._metrics.record_query()
        return events

    def get(self, event_id: UUID) -> Event:
        """
        Fetch one event.

        Raises:
            EventNotFound: If the id is unknown
        """
        try:
            event = self._store.get(event_id)
        except NotFound:
            if self._metrics is not None:
                self._metrics.record_lookup(found=False)
            log.info("event.not_found", id=str(event_id))
            raise
        if self._metrics is not None:
            self._metrics.record_lookup(found=True)
        return event

    def health_check(self) -> bool:
        """Check backend store health."""
        return self._store.health_check()
