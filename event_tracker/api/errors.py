"""Maps core errors to structured HTTP error responses."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from ..errors import NotFound, StorageError, ValidationError
from ..middleware import get_correlation_id

log = structlog.get_logger()


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    log.warning("request.invalid", field=exc.field, detail=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=400,
        content={
            "error": "ValidationError",
            "message": str(exc),
            "field": exc.field,
            "correlation_id": get_correlation_id(),
        },
    )


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    # Expected outcome, not an anomaly
    return JSONResponse(
        status_code=404,
        content={
            "error": "NotFound",
            "message": "Event not found",
            "correlation_id": get_correlation_id(),
        },
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    log.error(
        "storage.error",
        error=str(exc),
        error_type=exc.__class__.__name__,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "correlation_id": get_correlation_id(),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled.exception",
        error=str(exc),
        error_type=exc.__class__.__name__,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "correlation_id": get_correlation_id(),
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
