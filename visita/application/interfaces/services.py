"""Service interfaces (ports) consumed by the application layer."""

from __future__ import annotations

from typing import Protocol


class ITokenVerifier(Protocol):
    """Verifies a bearer token issued by the identity provider."""

    async def verify(self, token: str) -> str:
        """Return the authenticated uid; raise AuthenticationException if invalid."""
