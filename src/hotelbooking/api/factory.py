"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from hotelbooking.observability.correlation import (
    CORRELATION_ID_HEADER,
    new_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

from .errors import register_exception_handlers
from .routes import bookings, reports, rooms


def create_app() -> FastAPI:
    """Create the reservation API with all routes and error handlers mounted."""
    app = FastAPI(title="Hotel Booking", docs_url=None, redoc_url=None)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or new_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    register_exception_handlers(app)

    app.include_router(bookings.router)
    app.include_router(rooms.router)
    app.include_router(reports.router)

    return app
