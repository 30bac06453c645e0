# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Global error handling for consistent error responses."""

import logging
from collections.abc import Awaitable, Callable, Mapping

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from staybook.services.errors import StayBookError

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling and logging.

    Catches unhandled exceptions and converts them to appropriate
    JSON responses without exposing sensitive error details.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and handle any exceptions.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response.
        """
        try:
            return await call_next(request)
        except HTTPException:
            # Let FastAPI handle HTTP exceptions normally
            raise
        except Exception:
            logger.exception(
                "Unhandled exception for %s %s", request.method, request.url.path
            )

            return create_error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "An internal error occurred. Please try again later.",
                "internal_error",
            )


def create_error_response(
    status_code: int,
    message: str,
    error_type: str = "error",
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        status_code: HTTP status code.
        message: User-facing error message.
        error_type: Error type identifier.
        headers: Optional extra response headers.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "type": error_type,
        },
        headers=dict(headers) if headers else None,
    )


async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    """Convert a domain error into its mapped HTTP response.

    Args:
        request: Request that failed.
        exc: Raised StayBookError.

    Returns:
        JSONResponse with the error's status code and type.
    """
    if not isinstance(exc, StayBookError):
        raise exc
    logger.debug(
        "%s %s -> %s: %s",
        request.method,
        request.url.path,
        exc.error_type,
        exc.message,
    )
    return create_error_response(exc.status_code, exc.message, exc.error_type)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers mapping domain errors to HTTP responses.

    Args:
        app: FastAPI application.
    """
    app.add_exception_handler(StayBookError, handle_domain_error)
