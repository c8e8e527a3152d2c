"""Identity provider adapters."""

from visita.infrastructure.security.firebase_auth import FirebaseTokenVerifier

__all__ = ["FirebaseTokenVerifier"]
