"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SportsApiError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500, **details):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class MissingClientIdError(SportsApiError):
    def __init__(self):
        super().__init__("Missing X-Client-Id header", status_code=400)


class MissingParameterError(SportsApiError):
    def __init__(self, name: str, hint: str | None = None):
        super().__init__(hint or f"Missing query param: {name}", status_code=400)


class NotFoundError(SportsApiError):
    def __init__(self, message: str, **details):
        super().__init__(message, status_code=404, **details)


class UpstreamError(SportsApiError):
    """The sports-data API failed, timed out, or returned garbage."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class TeamMismatchError(UpstreamError):
    """Upstream answered a team lookup with a different team."""

    def __init__(self, wanted: str, got: str | None):
        super().__init__(f"SportsDB lookupteam mismatch (wanted {wanted}, got {got or 'none'})")
        self.wanted = wanted
        self.got = got


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(SportsApiError)
    async def handle_sports_api_error(_request: Request, exc: SportsApiError):
        if exc.status_code >= 500:
            logger.warning("%s: %s", type(exc).__name__, exc)
        return JSONResponse({"error": str(exc), **exc.details}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return JSONResponse({"error": f"Invalid request: {problems}"}, status_code=400)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
