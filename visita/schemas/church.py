"""Request/response schemas for church records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification
from visita.schemas.audit_log import AuditLogEntryResponse


class ChurchCreateRequest(BaseModel):
    """Body for POST /churches."""

    name: str = Field(..., min_length=1, max_length=200)
    diocese: Diocese
    municipality: str = Field(..., min_length=1, max_length=100)
    classification: HeritageClassification = HeritageClassification.UNKNOWN
    parish_id: str | None = Field(None, max_length=100)


class StatusTransitionRequest(BaseModel):
    """Body for POST /churches/{id}/transitions."""

    status: ChurchStatus
    note: str | None = Field(None, max_length=2000)


class ReclassifyRequest(BaseModel):
    """Body for PATCH /churches/{id}/classification."""

    classification: HeritageClassification
    note: str | None = Field(None, max_length=2000)


class ChurchResponse(BaseModel):
    """Church record (read)."""

    model_config = ConfigDict(from_attributes=True)

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


class ChurchListResponse(BaseModel):
    """Records of one diocese, sorted by name."""

    items: list[ChurchResponse]
    total: int


class ChurchMutationResponse(BaseModel):
    """Mutated record plus its audit entry.

    ``degraded`` is true when the change persisted but the audit entry
    could not be written; ``warnings`` then explains why.
    """

    model_config = ConfigDict(from_attributes=True)

    church: ChurchResponse
    audit_entry: AuditLogEntryResponse | None = None
    warnings: list[str] = []
    degraded: bool = False


class AvailableTransitionsResponse(BaseModel):
    """Statuses the caller may move the record to."""

    church_id: str
    current_status: ChurchStatus
    available: list[ChurchStatus]
