from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from starlette.concurrency import run_in_threadpool
import orjson
import structlog

from .schemas import ErrorResponse, ValidationErrorResponse
from ..errors import ValidationError
from ..models import Event, EventDraft, EventQuery, parse_event_id
from ..services.event_service import EventService

router = APIRouter(tags=["events"])
log = structlog.get_logger()

_CLIENT_ERROR = {400: {"model": ValidationErrorResponse}}


def get_event_service(request: Request) -> EventService:
    """The application's event service (set up by create_app)."""
    return request.app.state.event_service


@router.post(
    "/events",
    response_model=Event,
    status_code=status.HTTP_201_CREATED,
    responses=_CLIENT_ERROR,
)
async def create_event(request: Request, service: EventService = Depends(get_event_service)):
    """
    Store a new event.

    Body: ``{"event_type": str, "timestamp": ISO-8601 UTC str, "payload": any JSON}``.
    The identifier is generated by the store.
    """
    body = await request.body()
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise ValidationError("body", f"request body is not valid JSON ({e})") from None

    draft = EventDraft.parse(data)
    event = await run_in_threadpool(service.create, draft)
    log.debug("event.created", id=str(event.id), event_type=event.event_type)
    return event


@router.get("/events", response_model=list[Event], responses=_CLIENT_ERROR)
async def list_events(
    event_type: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    service: EventService = Depends(get_event_service),
):
    """
    List stored events, optionally filtered by exact type and an inclusive
    time range. Result order is unspecified.
    """
    query = EventQuery.parse(event_type=event_type, start=start, end=end)
    return await run_in_threadpool(service.list_events, query)


@router.get(
    "/events/{event_id}",
    response_model=Event,
    responses={**_CLIENT_ERROR, 404: {"model": ErrorResponse}},
)
async def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    return await run_in_threadpool(service.get, parse_event_id(event_id))
