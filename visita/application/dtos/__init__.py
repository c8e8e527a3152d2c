"""Application DTOs (frozen dataclasses shared by services and repositories)."""

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.audit_log import (
    AuditActor,
    AuditLogEntry,
    AuditLogEntryDraft,
    AuditLogSummary,
    FieldChange,
)
from visita.application.dtos.church import (
    ChurchCreate,
    ChurchResult,
    MutationResult,
    StatusUpdate,
    TransitionResult,
)

__all__ = [
    "ActorContext",
    "AuditActor",
    "AuditLogEntry",
    "AuditLogEntryDraft",
    "AuditLogSummary",
    "ChurchCreate",
    "ChurchResult",
    "FieldChange",
    "MutationResult",
    "StatusUpdate",
    "TransitionResult",
]
