"""Firestore-backed user profile lookup (implements IUserProfileRepository)."""

from __future__ import annotations

from visita.application.dtos.actor import ActorContext
from visita.domain.enums import Diocese, UserRole
from visita.infrastructure.firebase._rest_client import FirestoreRESTClient
from visita.infrastructure.firebase.collections import COLLECTION_USERS
from visita.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Profiles in these states cannot act (pending approval, suspended, archived term).
_INACTIVE_STATUSES = {"pending", "inactive", "suspended", "archived", "deleted"}


class FirestoreUserProfileRepository:
    """Reads ``users/{uid}`` profile documents written by the admin dashboard."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)

    async def get_actor(self, uid: str) -> ActorContext | None:
        """Return the actor for ``uid``; None if missing, inactive, or malformed."""
        doc = await self._coll.document(uid).get()
        if not doc:
            return None
        data = doc.to_dict()
        if str(data.get("status", "active")).lower() in _INACTIVE_STATUSES:
            return None
        try:
            role = UserRole(data.get("role"))
            diocese = Diocese(data["diocese"]) if data.get("diocese") else None
        except ValueError:
            logger.warning("User profile %s has an unknown role or diocese", uid)
            return None
        if not role.is_global and diocese is None:
            logger.warning("User profile %s has a diocese-scoped role but no diocese", uid)
            return None
        return ActorContext(
            uid=uid,
            name=data.get("name") or data.get("email", ""),
            email=data.get("email", ""),
            role=role,
            diocese=diocese,
            parish_id=data.get("parish_id") or data.get("parish"),
        )
