"""Use cases grouped by aggregate."""

from visita.application.use_cases.audit import ActivityLogService
from visita.application.use_cases.churches import ChurchRecordService

__all__ = ["ActivityLogService", "ChurchRecordService"]
