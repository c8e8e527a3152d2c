"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Implementations raise BackendUnavailableException on connectivity failure.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from visita.application.dtos.actor import ActorContext
    from visita.application.dtos.audit_log import AuditLogEntry
    from visita.application.dtos.church import ChurchCreate, ChurchResult, StatusUpdate
    from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification
    from visita.shared.enums import ResourceType


class IChurchRepository(Protocol):
    """Protocol for church record persistence (no delete)."""

    async def get_by_id(self, church_id: str) -> ChurchResult | None:
        """Return the record, or None if it does not exist."""

    async def list_by_diocese(
        self, diocese: Diocese, statuses: frozenset[ChurchStatus]
    ) -> list[ChurchResult]:
        """Return records of the diocese whose status is in ``statuses``."""

    async def create(self, data: ChurchCreate, created_by: str) -> ChurchResult:
        """Persist a new record in pending status; return it with its assigned id."""

    async def update_status(
        self,
        church_id: str,
        update: StatusUpdate,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        """Write status fields; return the updated record or None if missing.

        With ``expected_version`` the write only applies to that revision;
        otherwise ConcurrentModificationException is raised.
        """

    async def update_classification(
        self,
        church_id: str,
        classification: HeritageClassification,
        changed_by: str,
        changed_at: datetime,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        """Write a new classification; same contract as ``update_status``."""


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log. No update or delete."""

    async def append(self, entry: AuditLogEntry) -> None:
        """Persist one entry whose id and timestamp are already assigned."""

    async def list_by_diocese(self, diocese: str, limit: int) -> list[AuditLogEntry]:
        """Entries whose denormalized diocese equals ``diocese``, newest first."""

    async def list_all(self, limit: int) -> list[AuditLogEntry]:
        """All entries, newest first."""

    async def list_by_actor(self, actor_id: str, limit: int) -> list[AuditLogEntry]:
        """Entries written by ``actor_id``, newest first."""

    async def list_by_parish(self, parish_id: str, limit: int) -> list[AuditLogEntry]:
        """Entries on resources owned by ``parish_id``, newest first."""

    async def list_by_resource(
        self, resource_type: ResourceType, resource_id: str, limit: int
    ) -> list[AuditLogEntry]:
        """Entries referring to one resource, newest first."""


class IUserProfileRepository(Protocol):
    """Protocol for reading actor profiles (role, diocese, parish claims)."""

    async def get_actor(self, uid: str) -> ActorContext | None:
        """Return the actor context for ``uid``, or None if no usable profile exists."""
