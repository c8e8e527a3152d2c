"""DTOs for the audit log. Entries are append-only; no update DTO exists."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from visita.shared.enums import AuditAction, ResourceType


@dataclass(frozen=True)
class AuditActor:
    """Who performed the action, denormalized at write time."""

    uid: str
    name: str
    email: str
    role: str
    diocese: str | None = None


@dataclass(frozen=True)
class FieldChange:
    """One field-level change (old and new values verbatim)."""

    field: str
    old_value: Any
    new_value: Any


@dataclass(frozen=True)
class AuditLogEntryDraft:
    """Input for appending one audit entry; id and timestamp are assigned on record."""

    actor: AuditActor
    action: AuditAction
    resource_type: ResourceType
    resource_id: str
    diocese: str | None
    resource_name: str | None = None
    changes: tuple[FieldChange, ...] = ()
    parish_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None


@dataclass(frozen=True)
class AuditLogEntry:
    """Single persisted audit entry (read-model)."""

    id: str
    actor: AuditActor
    action: AuditAction
    resource_type: ResourceType
    resource_id: str
    diocese: str | None
    timestamp: datetime
    resource_name: str | None = None
    changes: tuple[FieldChange, ...] = ()
    parish_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None


@dataclass(frozen=True)
class AuditLogSummary:
    """Aggregate counts over a set of audit entries."""

    total: int
    by_action: dict[str, int]
    by_resource_type: dict[str, int]
    by_actor: dict[str, int]
    earliest: datetime | None
    latest: datetime | None
