"""Base interface for event store backends."""
from abc import ABC, abstractmethod
from uuid import UUID

from ..models import Event, EventDraft, EventQuery


class EventStore(ABC):
    """
    Abstract interface for event store implementations.

    Handlers depend on insert/get/list only; any backend providing
    them can replace the in-memory one.
    Implementations must be safe to call from many threads at once.
    """

    @abstractmethod
    def insert(self, draft: EventDraft) -> Event:
        """
        Store a new event under a freshly generated identifier.

        Args:
            draft: Validated client-supplied event content

        Returns:
            The stored event, including its identifier

        Raises:
            StorageError: On an underlying resource fault
        """

    @abstractmethod
    def get(self, event_id: UUID) -> Event:
        """
        Retrieve one event by identifier.

        Raises:
            EventNotFound: If no event was ever stored under ``event_id``
            StorageError: On an underlying resource fault
        """

    @abstractmethod
    def list_events(self, query: EventQuery) -> list[Event]:
        """
        Return every stored event matching ``query``.

        Reflects every insert that returned before the call began.
        Result order is unspecified.
        """

    @abstractmethod
    def count(self) -> int:
        """Number of stored events."""

    def health_check(self) -> bool:
        """
        Check if the backend is healthy and accessible.

        Returns:
            True if backend is healthy, False otherwise
        """
        return True
