"""DTOs for church record use cases (no dependency on the document store)."""

from dataclasses import dataclass, field
from datetime import datetime

from visita.application.dtos.audit_log import AuditLogEntry
from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification


@dataclass(frozen=True)
class ChurchCreate:
    """Input for submitting a new church record (always starts in pending)."""

    name: str
    diocese: Diocese
    municipality: str
    classification: HeritageClassification
    parish_id: str | None = None


@dataclass(frozen=True)
class ChurchResult:
    """Church record read-model."""

    id: str
    name: str
    diocese: Diocese
    municipality: str
    classification: HeritageClassification
    status: ChurchStatus
    parish_id: str | None = None
    status_note: str | None = None
    status_changed_at: datetime | None = None
    status_changed_by: str | None = None
    heritage_reviewed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Opaque token of the stored revision this read-model was taken from;
    # conditional writes pass it back to detect a concurrent change.
    version: str | None = None


@dataclass(frozen=True)
class StatusUpdate:
    """Fields written by one status transition."""

    status: ChurchStatus
    note: str | None
    changed_by: str
    changed_at: datetime
    heritage_reviewed: bool


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a church mutation and its audit entry.

    ``audit_entry`` is None when the mutation persisted but the audit write
    failed; ``warnings`` then says so (degraded success).
    """

    church: ChurchResult
    audit_entry: AuditLogEntry | None
    warnings: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True when the mutation succeeded without its audit entry."""
        return self.audit_entry is None


# Transitions and reclassifications share the same outcome contract.
TransitionResult = MutationResult
