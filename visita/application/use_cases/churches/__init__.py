"""Church record use cases."""

from visita.application.use_cases.churches.church_operations import (
    ChurchRecordService,
    audit_action_for_status,
)

__all__ = ["ChurchRecordService", "audit_action_for_status"]
