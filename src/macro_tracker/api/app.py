"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from macro_tracker.api.foods import router as foods_router
from macro_tracker.api.meals import analytics_router
from macro_tracker.api.meals import router as meals_router
from macro_tracker.api.users import router as users_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer
from macro_tracker.errors import (
    DuplicateKeyError,
    InvalidAmountError,
    InvalidInputError,
    MacroTrackerError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

_ERROR_STATUSES: tuple[tuple[type[MacroTrackerError], int, str], ...] = (
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED, "NOT_AUTHENTICATED"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    (DuplicateKeyError, status.HTTP_409_CONFLICT, "CONFLICT"),
    (InvalidAmountError, status.HTTP_400_BAD_REQUEST, "INVALID_AMOUNT"),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST, "INVALID_INPUT"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "VALIDATION_FAILED"),
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="MacroTrack", lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(analytics_router)
    app.include_router(foods_router)
    app.include_router(users_router)

    @app.exception_handler(MacroTrackerError)
    async def handle_domain_error(
        request: Request, exc: MacroTrackerError
    ) -> JSONResponse:
        status_code, code = error_status(exc)
        body: dict[str, object] = {"error": str(exc), "code": code}
        if isinstance(exc, ValidationError):
            body["details"] = [{"field": exc.field, "message": exc.message}]
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Unhandled error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content=body)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status(exc: MacroTrackerError) -> tuple[int, str]:
    """Return the HTTP status and error code for a domain error."""
    for error_type, status_code, code in _ERROR_STATUSES:
        if isinstance(exc, error_type):
            return status_code, code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"
