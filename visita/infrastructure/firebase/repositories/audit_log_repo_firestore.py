"""Firestore-backed audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

from typing import Any

from visita.application.dtos.audit_log import AuditActor, AuditLogEntry, FieldChange
from visita.infrastructure.firebase._rest_client import FirestoreRESTClient, Query
from visita.infrastructure.firebase.collections import COLLECTION_AUDIT_LOGS
from visita.shared.enums import AuditAction, ResourceType
from visita.shared.utils.datetime import ensure_utc


def _entry_to_doc(entry: AuditLogEntry) -> dict[str, Any]:
    return {
        "actor": {
            "uid": entry.actor.uid,
            "name": entry.actor.name,
            "email": entry.actor.email,
            "role": entry.actor.role,
            "diocese": entry.actor.diocese,
        },
        "action": entry.action.value,
        "resource_type": entry.resource_type.value,
        "resource_id": entry.resource_id,
        "resource_name": entry.resource_name,
        "changes": [
            {"field": c.field, "old_value": c.old_value, "new_value": c.new_value}
            for c in entry.changes
        ],
        "diocese": entry.diocese,
        "parish_id": entry.parish_id,
        "metadata": entry.metadata,
        "session_id": entry.session_id,
        "timestamp": entry.timestamp,
    }


def _doc_to_entry(doc_id: str, data: dict[str, Any]) -> AuditLogEntry:
    actor = data.get("actor") or {}
    return AuditLogEntry(
        id=doc_id,
        actor=AuditActor(
            uid=actor.get("uid", ""),
            name=actor.get("name", ""),
            email=actor.get("email", ""),
            role=actor.get("role", ""),
            diocese=actor.get("diocese"),
        ),
        action=AuditAction(data["action"]),
        resource_type=ResourceType(data["resource_type"]),
        resource_id=data.get("resource_id", ""),
        diocese=data.get("diocese"),
        timestamp=ensure_utc(data["timestamp"]),
        resource_name=data.get("resource_name"),
        changes=tuple(
            FieldChange(c.get("field", ""), c.get("old_value"), c.get("new_value"))
            for c in data.get("changes") or []
        ),
        parish_id=data.get("parish_id"),
        metadata=data.get("metadata") or {},
        session_id=data.get("session_id"),
    )


class FirestoreAuditLogRepository:
    """Audit entries in the ``audit_logs`` collection. No update/delete."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_AUDIT_LOGS)

    async def append(self, entry: AuditLogEntry) -> None:
        """Create the entry under its pre-assigned id (never overwrites)."""
        await self._coll.create(entry.id, _entry_to_doc(entry))

    async def _run(self, query: Query, limit: int) -> list[AuditLogEntry]:
        q = query.order_by("timestamp", "DESCENDING").limit(limit)
        return [_doc_to_entry(s.id, s.to_dict()) async for s in q.stream()]

    async def list_by_diocese(self, diocese: str, limit: int) -> list[AuditLogEntry]:
        return await self._run(self._coll.where("diocese", "==", diocese), limit)

    async def list_all(self, limit: int) -> list[AuditLogEntry]:
        return await self._run(self._coll.query(), limit)

    async def list_by_actor(self, actor_id: str, limit: int) -> list[AuditLogEntry]:
        return await self._run(self._coll.where("actor.uid", "==", actor_id), limit)

    async def list_by_parish(self, parish_id: str, limit: int) -> list[AuditLogEntry]:
        return await self._run(self._coll.where("parish_id", "==", parish_id), limit)

    async def list_by_resource(
        self, resource_type: ResourceType, resource_id: str, limit: int
    ) -> list[AuditLogEntry]:
        q = self._coll.where("resource_type", "==", resource_type.value).where(
            "resource_id", "==", resource_id
        )
        return await self._run(q, limit)
