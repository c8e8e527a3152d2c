"""Audit log API: role-scoped activity log and summary (who did what, when)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from visita.api.v1.dependencies import CurrentActor, get_activity_log_service
from visita.application.use_cases.audit import ActivityLogService
from visita.core.config import get_settings
from visita.domain.enums import Diocese
from visita.schemas.audit_log import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    AuditLogSummaryResponse,
)
from visita.shared.enums import AuditAction

router = APIRouter()

ActivityDep = Annotated[ActivityLogService, Depends(get_activity_log_service)]


def _resolve_limit(limit: int | None) -> int:
    return limit or get_settings().audit_query_default_limit


@router.get("", response_model=AuditLogListResponse)
async def list_audit_log(
    actor: CurrentActor,
    activity: ActivityDep,
    diocese: Diocese | None = Query(None, description="Diocese (global roles only; others default to their own)"),
    limit: int | None = Query(None, ge=1, description="Max entries (default from config)"),
    actions: list[AuditAction] | None = Query(
        None, description="Show only these actions (repeatable)"
    ),
) -> AuditLogListResponse:
    """List the audit entries visible to the caller, newest first."""
    limit = _resolve_limit(limit)
    entries = await activity.list_for(actor, limit, diocese=diocese, actions=actions)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in entries],
        limit=limit,
    )


@router.get("/summary", response_model=AuditLogSummaryResponse)
async def audit_log_summary(
    actor: CurrentActor,
    activity: ActivityDep,
    diocese: Diocese | None = Query(None),
    limit: int | None = Query(None, ge=1),
) -> AuditLogSummaryResponse:
    """Counts by action, resource type and actor over the caller's recent entries."""
    summary = await activity.summary_for(actor, _resolve_limit(limit), diocese=diocese)
    return AuditLogSummaryResponse.model_validate(summary)
