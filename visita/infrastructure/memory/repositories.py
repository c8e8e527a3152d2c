"""In-memory church, audit log and user profile repositories."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.audit_log import AuditLogEntry
from visita.application.dtos.church import ChurchCreate, ChurchResult, StatusUpdate
from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification
from visita.domain.exceptions import ConcurrentModificationException
from visita.shared.enums import ResourceType
from visita.shared.utils.datetime import utc_now
from visita.shared.utils.generators import generate_cuid


@dataclass
class InMemoryStore:
    """Shared state for the in-memory repositories (one per app instance)."""

    churches: dict[str, ChurchResult] = field(default_factory=dict)
    audit_logs: dict[str, AuditLogEntry] = field(default_factory=dict)
    users: dict[str, ActorContext] = field(default_factory=dict)


def _newest_first(entries: list[AuditLogEntry], limit: int) -> list[AuditLogEntry]:
    return sorted(entries, key=lambda e: (e.timestamp, e.id), reverse=True)[:limit]


class InMemoryChurchRepository:
    """Church records held in a dict; writes are conditional on a revision counter."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def _current(
        self, church_id: str, expected_version: str | None
    ) -> ChurchResult | None:
        current = self._store.churches.get(church_id)
        if (
            current is not None
            and expected_version is not None
            and current.version != expected_version
        ):
            raise ConcurrentModificationException("church", church_id)
        return current

    def _save(self, church: ChurchResult) -> ChurchResult:
        revision = int(church.version or 0) + 1
        saved = replace(church, version=str(revision))
        self._store.churches[saved.id] = saved
        return saved

    async def get_by_id(self, church_id: str) -> ChurchResult | None:
        return self._store.churches.get(church_id)

    async def list_by_diocese(
        self, diocese: Diocese, statuses: frozenset[ChurchStatus]
    ) -> list[ChurchResult]:
        return [
            c
            for c in self._store.churches.values()
            if c.diocese == diocese and c.status in statuses
        ]

    async def create(self, data: ChurchCreate, created_by: str) -> ChurchResult:
        now = utc_now()
        church = ChurchResult(
            id=generate_cuid(),
            name=data.name.strip(),
            diocese=data.diocese,
            municipality=data.municipality.strip(),
            classification=data.classification,
            status=ChurchStatus.PENDING,
            parish_id=data.parish_id,
            status_changed_at=now,
            status_changed_by=created_by,
            created_at=now,
            updated_at=now,
        )
        return self._save(church)

    async def update_status(
        self,
        church_id: str,
        update: StatusUpdate,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        current = self._current(church_id, expected_version)
        if current is None:
            return None
        return self._save(
            replace(
                current,
                status=update.status,
                status_note=update.note,
                status_changed_at=update.changed_at,
                status_changed_by=update.changed_by,
                heritage_reviewed=update.heritage_reviewed,
                updated_at=update.changed_at,
            )
        )

    async def update_classification(
        self,
        church_id: str,
        classification: HeritageClassification,
        changed_by: str,
        changed_at: datetime,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        current = self._current(church_id, expected_version)
        if current is None:
            return None
        return self._save(
            replace(current, classification=classification, updated_at=changed_at)
        )


class InMemoryAuditLogRepository:
    """Append-only audit entries held in a dict keyed by id."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def append(self, entry: AuditLogEntry) -> None:
        if entry.id in self._store.audit_logs:
            raise ValueError(f"Audit entry {entry.id} already exists")
        self._store.audit_logs[entry.id] = entry

    async def list_by_diocese(self, diocese: str, limit: int) -> list[AuditLogEntry]:
        return _newest_first(
            [e for e in self._store.audit_logs.values() if e.diocese == diocese], limit
        )

    async def list_all(self, limit: int) -> list[AuditLogEntry]:
        return _newest_first(list(self._store.audit_logs.values()), limit)

    async def list_by_actor(self, actor_id: str, limit: int) -> list[AuditLogEntry]:
        return _newest_first(
            [e for e in self._store.audit_logs.values() if e.actor.uid == actor_id],
            limit,
        )

    async def list_by_parish(self, parish_id: str, limit: int) -> list[AuditLogEntry]:
        return _newest_first(
            [e for e in self._store.audit_logs.values() if e.parish_id == parish_id],
            limit,
        )

    async def list_by_resource(
        self, resource_type: ResourceType, resource_id: str, limit: int
    ) -> list[AuditLogEntry]:
        return _newest_first(
            [
                e
                for e in self._store.audit_logs.values()
                if e.resource_type == resource_type and e.resource_id == resource_id
            ],
            limit,
        )


class InMemoryUserProfileRepository:
    """Actor profiles held in a dict; populate with ``add``."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def add(self, actor: ActorContext) -> None:
        self._store.users[actor.uid] = actor

    async def get_actor(self, uid: str) -> ActorContext | None:
        return self._store.users.get(uid)
