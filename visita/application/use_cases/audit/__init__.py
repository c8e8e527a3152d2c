"""Activity log use cases (role-scoped audit reads)."""

from visita.application.use_cases.audit.activity_log import ActivityLogService

__all__ = ["ActivityLogService"]
