"""Event store backends."""
from .base import EventStore
from .locks import ReadWriteLock
from .memory import InMemoryEventStore

__all__ = [
    "EventStore",
    "InMemoryEventStore",
    "ReadWriteLock",
]
