# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Authentication middleware reading the caller ID set by the gateway."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from staybook.config import get_settings
from staybook.middleware.error_handler import create_error_response

logger = logging.getLogger(__name__)

# Paths that don't require authentication
PUBLIC_PATHS = frozenset(
    {
        "/health",
        "/ical",
        "/docs",
        "/redoc",
        "/openapi.json",
    }
)

LISTINGS_PREFIX = "/api/listings"


def is_public_path(path: str, method: str = "GET") -> bool:
    """Check if a request is public (no auth required).

    Args:
        path: Request path to check.
        method: HTTP method.

    Returns:
        True if the request may be served without a caller ID.
    """
    if path in PUBLIC_PATHS or path.startswith("/ical/"):
        return True

    # Registration
    if method == "POST" and path == "/api/users":
        return True

    # Browsing listings and their availability; host-only booking view excluded
    if method == "GET" and (
        path == LISTINGS_PREFIX or path.startswith(f"{LISTINGS_PREFIX}/")
    ):
        return not path.rstrip("/").endswith("/bookings")

    return False


def parse_user_id(raw: str | None) -> int | None:
    """Parse the caller ID header value.

    Args:
        raw: Header value.

    Returns:
        Positive integer user ID, or None if missing or malformed.
    """
    if not raw:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    return user_id if user_id > 0 else None


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to enforce caller identification.

    Token verification happens upstream; this service trusts the caller ID
    header and rejects non-public requests that lack it.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and enforce authentication.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response, 401 if a protected request has no caller ID.
        """
        settings = get_settings()
        path = request.url.path

        user_id = parse_user_id(request.headers.get(settings.auth_header))
        request.state.user_id = user_id

        if user_id is None and not is_public_path(path, request.method):
            logger.warning("Unauthorized access attempt to %s %s", request.method, path)
            return create_error_response(
                status.HTTP_401_UNAUTHORIZED,
                "Authentication required",
                "unauthorized",
                headers={"WWW-Authenticate": settings.auth_header},
            )

        if user_id is not None:
            logger.debug("Authenticated request from user %s to %s", user_id, path)

        return await call_next(request)


def get_current_user(request: Request) -> int | None:
    """Get the current authenticated user ID from request.

    Args:
        request: Current HTTP request.

    Returns:
        User ID or None if not authenticated.
    """
    return getattr(request.state, "user_id", None)


def require_user_id(request: Request) -> int:
    """FastAPI dependency returning the authenticated user ID.

    Args:
        request: Current HTTP request.

    Returns:
        User ID.

    Raises:
        HTTPException: 401 if the request is not authenticated.
    """
    user_id = get_current_user(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user_id
