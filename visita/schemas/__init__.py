"""Pydantic request/response schemas for the HTTP API."""

from visita.schemas.audit_log import (
    AuditActorResponse,
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogSummaryResponse,
    FieldChangeResponse,
)
from visita.schemas.church import (
    AvailableTransitionsResponse,
    ChurchCreateRequest,
    ChurchListResponse,
    ChurchMutationResponse,
    ChurchResponse,
    ReclassifyRequest,
    StatusTransitionRequest,
)
from visita.schemas.health import HealthResponse

__all__ = [
    "AuditActorResponse",
    "AuditLogEntryResponse",
    "AuditLogListResponse",
    "AuditLogSummaryResponse",
    "AvailableTransitionsResponse",
    "ChurchCreateRequest",
    "ChurchListResponse",
    "ChurchMutationResponse",
    "ChurchResponse",
    "FieldChangeResponse",
    "HealthResponse",
    "ReclassifyRequest",
    "StatusTransitionRequest",
]
