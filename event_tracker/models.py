"""Event shapes and their validation rules."""
import re
from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import (
    AfterValidator,
    AwareDatetime,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    JsonValue,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

# datetime keeps microseconds only; longer fractions would be truncated
_SUB_MICROSECOND = re.compile(r"[.,]\d{7,}")


def _parse_iso_timestamp(value: Any) -> Any:
    """Accept ISO-8601 strings (``Z`` suffix allowed) and datetime objects only."""
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError("expected an ISO-8601 timestamp string")
    if _SUB_MICROSECOND.search(value):
        raise ValueError("timestamp precision finer than microseconds is not supported")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"invalid ISO-8601 timestamp {value!r}") from None


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.astimezone(timezone.utc)


UtcTimestamp = Annotated[AwareDatetime, BeforeValidator(_parse_iso_timestamp), AfterValidator(_to_utc)]


def _as_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Collapse a pydantic error into our field-level ValidationError."""
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err["loc"]) or "body"
    message = err["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationError(field, message)


class EventDraft(BaseModel):
    """Client-supplied part of an event, before the store assigns an id."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    event_type: str = Field(..., description="Opaque event type label")
    timestamp: UtcTimestamp = Field(..., description="When the event happened (UTC)")
    payload: JsonValue = Field(..., description="Arbitrary JSON value, stored verbatim")

    @field_validator("event_type")
    @classmethod
    def _check_event_type(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @classmethod
    def parse(cls, data: Any) -> "EventDraft":
        """
        Build a draft from a decoded JSON request body.

        Raises:
            ValidationError: naming the first field that failed.
        """
        if not isinstance(data, dict):
            raise ValidationError("body", "expected a JSON object")
        try:
            return cls.model_validate(data)
        except PydanticValidationError as exc:
            raise _as_validation_error(exc) from None


class Event(BaseModel):
    """A stored event. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(..., description="Store-generated unique identifier")
    event_type: str
    timestamp: UtcTimestamp
    payload: JsonValue

    @classmethod
    def from_draft(cls, draft: EventDraft, event_id: UUID) -> "Event":
        return cls(
            id=event_id,
            event_type=draft.event_type,
            timestamp=draft.timestamp,
            payload=draft.payload,
        )


class EventQuery(BaseModel):
    """Filter criteria. Every field is optional; absent fields match anything."""
    model_config = ConfigDict(frozen=True)

    event_type: Optional[str] = None
    start: Optional[UtcTimestamp] = None
    end: Optional[UtcTimestamp] = None

    @property
    def is_empty_range(self) -> bool:
        """True when both bounds are set and no timestamp can satisfy them."""
        return self.start is not None and self.end is not None and self.start > self.end

    @classmethod
    def parse(
        cls,
        event_type: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> "EventQuery":
        """
        Build a filter from raw query parameters.

        Raises:
            ValidationError: if ``start`` or ``end`` is present but not a UTC timestamp.
        """
        try:
            return cls(event_type=event_type, start=start, end=end)
        except PydanticValidationError as exc:
            raise _as_validation_error(exc) from None


def parse_event_id(raw: str) -> UUID:
    """Parse a path segment into an event identifier."""
    try:
        return UUID(raw)
    except ValueError:
        raise ValidationError("id", f"{raw!r} is not a valid event identifier") from None
