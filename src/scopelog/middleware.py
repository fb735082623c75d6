"""Starlette middleware that binds request identity for log correlation.

Reads the tenant and user headers plus ``X-Request-ID`` from each request
and binds them in ``scopelog.context`` while the request is handled, so
``with_context()`` anywhere downstream picks them up. The request ID is
echoed on every response.

Spoofed or malformed request IDs are replaced with a fresh UUID.
"""

from __future__ import annotations

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .context import bind_identity

ORG_ID_HEADER = "X-Scope-OrgID"
USER_ID_HEADER = "X-Scope-UserID"
REQUEST_ID_HEADER = "X-Request-ID"

# Allowed request-ID format: 8-128 chars of hex, dash, or alphanumeric.
_VALID_REQUEST_ID = re.compile(r"^[a-zA-Z0-9\-]{8,128}$")


def resolve_request_id(incoming: str | None) -> str:
    """Return ``incoming`` if it is a well-formed ID, else a new UUID."""
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class IdentityContextMiddleware(BaseHTTPMiddleware):
    """Bind org, user and request IDs for the duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        org_id = request.headers.get(ORG_ID_HEADER) or None
        user_id = request.headers.get(USER_ID_HEADER) or None

        with bind_identity(org_id=org_id, user_id=user_id, request_id=rid):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
