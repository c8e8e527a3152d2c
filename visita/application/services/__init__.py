"""Application services (audit log, authorization)."""

from visita.application.services.audit_log_service import (
    AuditLogService,
    filter_by_actions,
)
from visita.application.services.authorization_service import (
    AuditScope,
    AuthorizationService,
)

__all__ = [
    "AuditLogService",
    "AuditScope",
    "AuthorizationService",
    "filter_by_actions",
]
