"""Middleware configuration for the records API.

This module sets up middleware for request logging and last-resort error
handling. Domain errors (validation, not found, storage) are mapped by the
exception handlers in dxrecords.api.errors; anything that gets past them
ends up here as a generic 500.
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from dxrecords.api.errors import INTERNAL_ERROR_BODY

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response details.

        Parameters:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response with X-Process-Time and X-Request-ID headers
        """
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        context = {
            "request_id": request_id,
            "client_ip": request.client.host if request.client else "unknown",
            "endpoint": request.url.path,
        }

        logger.info(f"{request.method} {request.url.path}", extra=context)

        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        response.headers["X-Request-ID"] = request_id

        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s",
            extra=context
        )

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for global error handling."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Turn any unhandled exception into a generic 500 response.

        The exception is logged with its traceback; its message is never
        returned to the caller.
        """
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled error on {request.method} {request.url.path}: {type(e).__name__}",
                exc_info=True
            )
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


def setup_middleware(app) -> None:
    """Setup application middleware.

    Parameters:
        app: FastAPI application instance

    Middleware Order (important):
        1. ErrorHandlingMiddleware - Handles errors
        2. LoggingMiddleware - Logs requests/responses (outermost, sees the final status)
    """
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)
