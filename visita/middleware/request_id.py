"""Request ID middleware.

Generates or forwards X-Request-ID and echoes it on the response. The id is
also stored on the request state, and church mutations record it as the
audit entry's session_id. Client-provided values are sanitized (length and
character set) before they reach logs or the audit log.
"""

import re
from typing import Callable

from starlette.requests import Request

from visita.shared.utils.generators import generate_cuid

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if it is a safe id; otherwise a freshly generated one."""
    if raw is None:
        return generate_cuid()
    raw = raw.strip()
    if not REQUEST_ID_ALLOWED_PATTERN.match(raw):
        return generate_cuid()
    return raw


def get_request_id(request: Request) -> str | None:
    """Request id set by RequestIDMiddleware, or None outside of it."""
    return getattr(request.state, "request_id", None)


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request id header on each request and response. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((header_name.lower().encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
