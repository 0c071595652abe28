"""Error taxonomy shared by the store, the service layer and the HTTP handlers.

Each category maps to exactly one response class at the HTTP boundary:

- ``ValidationError`` -> 400, message names the offending field
- ``NotFound``        -> 404, no detail beyond "not found"
- ``StorageError``    -> 500, internal detail is logged, never returned
"""


class EventTrackerError(Exception):
    """Base class for all errors raised by the event tracker core."""


class ValidationError(EventTrackerError):
    """Malformed or missing client input."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFound(EventTrackerError):
    """A well-formed identifier with nothing stored under it."""


class EventNotFound(NotFound):
    def __init__(self, event_id):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class StorageError(EventTrackerError):
    """Underlying resource fault in a store implementation."""
