"""
Error taxonomy for the analytics endpoints.

Every error carries the HTTP status and the plain‑text body that is
sent back to the client.  ``register_error_handlers`` installs the
handlers that render them, and maps the router's own 404/405 replies
onto the same ``Not Found`` body.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AnalyticsError(Exception):
    """Base class for errors surfaced to clients."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class Unauthorized(AnalyticsError):
    status_code = 401
    message = "Unauthorized"


class MissingField(AnalyticsError):
    status_code = 400
    message = "Bad Request: Missing required fields"


class InvalidField(AnalyticsError):
    status_code = 400
    message = "Bad Request: Invalid field"


class InvalidJSON(AnalyticsError):
    status_code = 400
    message = "Bad Request: Invalid JSON"


class StoreWriteFailure(AnalyticsError):
    status_code = 500
    message = "Internal Server Error: Failed to record request"


class NotFound(AnalyticsError):
    status_code = 404
    message = "Not Found"


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    # Unknown paths and known paths with the wrong method are both "Not Found".
    if exc.status_code in (404, 405):
        return PlainTextResponse(NotFound.message, status_code=404)
    logging.getLogger(__name__).warning("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AnalyticsError, analytics_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
