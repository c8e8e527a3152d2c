"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from visita.shared.enums import AuditAction, ResourceType


class AuditActorResponse(BaseModel):
    """Actor snapshot stored with an entry."""

    model_config = ConfigDict(from_attributes=True)

    uid: str
    name: str
    email: str
    role: str
    diocese: str | None = None


class FieldChangeResponse(BaseModel):
    """One field-level change."""

    model_config = ConfigDict(from_attributes=True)

    field: str
    old_value: Any = None
    new_value: Any = None


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    actor: AuditActorResponse
    action: AuditAction
    resource_type: ResourceType
    resource_id: str
    resource_name: str | None = None
    diocese: str | None = None
    parish_id: str | None = None
    changes: list[FieldChangeResponse] = []
    metadata: dict[str, Any] = {}
    session_id: str | None = None
    timestamp: datetime


class AuditLogListResponse(BaseModel):
    """Newest-first list of audit log entries (no pagination cursor)."""

    items: list[AuditLogEntryResponse]
    limit: int


class AuditLogSummaryResponse(BaseModel):
    """Counts over the entries visible to the caller."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    by_action: dict[str, int]
    by_resource_type: dict[str, int]
    by_actor: dict[str, int]
    earliest: datetime | None = None
    latest: datetime | None = None
