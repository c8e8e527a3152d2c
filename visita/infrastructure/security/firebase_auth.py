"""Firebase Auth ID token verification (implements ITokenVerifier).

Tokens are verified with google-auth against Google's public certificates
for the configured Firebase project. Verification is blocking I/O, so it
runs in a worker thread.
"""

from __future__ import annotations

import asyncio

from google.auth import exceptions as google_auth_exceptions

from visita.domain.exceptions import (
    AuthenticationException,
    BackendUnavailableException,
)
from visita.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _verify_sync(token: str, project_id: str) -> dict:
    from google.auth.transport.requests import Request
    from google.oauth2 import id_token

    return id_token.verify_firebase_token(token, Request(), audience=project_id)


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens and returns the user's uid."""

    def __init__(self, project_id: str) -> None:
        if not project_id:
            raise ValueError("project_id is required for Firebase token verification")
        self.project_id = project_id

    async def verify(self, token: str) -> str:
        """Return the uid in a valid token; raise AuthenticationException otherwise."""
        if not token:
            raise AuthenticationException("Missing bearer token")
        try:
            claims = await asyncio.to_thread(_verify_sync, token, self.project_id)
        except google_auth_exceptions.TransportError as e:
            raise BackendUnavailableException(
                "fetch token certificates", reason=str(e)
            ) from e
        except ValueError as e:
            logger.info("Rejected Firebase ID token: %s", e)
            raise AuthenticationException("Invalid or expired token") from e
        uid = (claims or {}).get("user_id") or (claims or {}).get("sub")
        if not uid:
            raise AuthenticationException("Token has no subject")
        return uid
