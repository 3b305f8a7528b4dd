"""Translate domain and storage errors into HTTP responses.

| Error                          | Status | detail                    |
|--------------------------------|--------|---------------------------|
| UserNotFoundError              | 404    | user_not_found            |
| RoomNotFoundError              | 404    | room_not_found            |
| BookingNotFoundError           | 404    | booking_not_found         |
| InvalidDateRangeError          | 400    | invalid_date_range        |
| RoomUnavailableError           | 400    | room_unavailable          |
| BookingNotCancellableError     | 400    | booking_not_cancellable   |
| InvalidStatusTransitionError   | 400    | invalid_status_transition |
| StorageError                   | 500    | storage_error             |
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hotelbooking.domain.intervals import InvalidDateRangeError
from hotelbooking.domain.models import InvalidStatusTransitionError
from hotelbooking.domain.reservations import (
    BookingNotCancellableError,
    BookingNotFoundError,
    RoomNotFoundError,
    RoomUnavailableError,
    UserNotFoundError,
)
from hotelbooking.infra.store import StorageError
from hotelbooking.observability.logging import get_logger
from hotelbooking.observability.redaction import safe_log_context

logger = get_logger(__name__)

ERROR_STATUS: dict[type[Exception], tuple[int, str]] = {
    UserNotFoundError: (404, "user_not_found"),
    RoomNotFoundError: (404, "room_not_found"),
    BookingNotFoundError: (404, "booking_not_found"),
    InvalidDateRangeError: (400, "invalid_date_range"),
    RoomUnavailableError: (400, "room_unavailable"),
    BookingNotCancellableError: (400, "booking_not_cancellable"),
    InvalidStatusTransitionError: (400, "invalid_status_transition"),
    StorageError: (500, "storage_error"),
}


async def _handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    status_code, code = next(
        ERROR_STATUS[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS
    )

    if status_code >= 500:
        logger.error(
            "request failed",
            exc_info=exc,
            extra={"extra_fields": safe_log_context(path=request.url.path, detail=code)},
        )
        message = "Internal storage error"
    else:
        logger.info(
            "request rejected",
            extra={"extra_fields": safe_log_context(path=request.url.path, detail=code)},
        )
        message = str(exc)

    return JSONResponse(status_code=status_code, content={"detail": code, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type in ERROR_STATUS:
        app.add_exception_handler(exc_type, _handle_domain_error)
