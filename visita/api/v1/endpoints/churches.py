"""Church records API: submit, list, review transitions, reclassify, history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from visita.api.v1.dependencies import (
    CurrentActor,
    RequestId,
    get_activity_log_service,
    get_church_service,
)
from visita.application.dtos.church import ChurchCreate, MutationResult
from visita.application.use_cases.audit import ActivityLogService
from visita.application.use_cases.churches import ChurchRecordService
from visita.core.config import get_settings
from visita.domain.enums import ChurchStatus, Diocese
from visita.schemas.audit_log import AuditLogEntryResponse, AuditLogListResponse
from visita.schemas.church import (
    AvailableTransitionsResponse,
    ChurchCreateRequest,
    ChurchListResponse,
    ChurchMutationResponse,
    ChurchResponse,
    ReclassifyRequest,
    StatusTransitionRequest,
)

router = APIRouter()

ChurchServiceDep = Annotated[ChurchRecordService, Depends(get_church_service)]


def _mutation_response(result: MutationResult) -> ChurchMutationResponse:
    return ChurchMutationResponse.model_validate(result)


@router.post(
    "",
    response_model=ChurchMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_church(
    body: ChurchCreateRequest,
    actor: CurrentActor,
    service: ChurchServiceDep,
    request_id: RequestId,
) -> ChurchMutationResponse:
    """Submit a new church record (starts in pending)."""
    result = await service.create_church(
        actor,
        ChurchCreate(
            name=body.name,
            diocese=body.diocese,
            municipality=body.municipality,
            classification=body.classification,
            parish_id=body.parish_id,
        ),
        request_id=request_id,
    )
    return _mutation_response(result)


@router.get("", response_model=ChurchListResponse)
async def list_churches(
    actor: CurrentActor,
    service: ChurchServiceDep,
    diocese: Diocese = Query(..., description="Diocese to list"),
    status_filter: list[ChurchStatus] | None = Query(
        None, alias="status", description="Repeat to select several statuses"
    ),
) -> ChurchListResponse:
    """List a diocese's records, optionally filtered by status, sorted by name."""
    items = await service.list_by_diocese(
        actor, diocese, frozenset(status_filter) if status_filter else None
    )
    return ChurchListResponse(
        items=[ChurchResponse.model_validate(c) for c in items],
        total=len(items),
    )


@router.get("/{church_id}", response_model=ChurchResponse)
async def get_church(
    church_id: str,
    actor: CurrentActor,
    service: ChurchServiceDep,
) -> ChurchResponse:
    """Get one church record."""
    return ChurchResponse.model_validate(await service.get_church(actor, church_id))


@router.get("/{church_id}/transitions", response_model=AvailableTransitionsResponse)
async def list_available_transitions(
    church_id: str,
    actor: CurrentActor,
    service: ChurchServiceDep,
) -> AvailableTransitionsResponse:
    """Statuses the caller may move this record to now."""
    church = await service.get_church(actor, church_id)
    return AvailableTransitionsResponse(
        church_id=church.id,
        current_status=church.status,
        available=service.available_transitions(actor, church),
    )


@router.post("/{church_id}/transitions", response_model=ChurchMutationResponse)
async def transition_church_status(
    church_id: str,
    body: StatusTransitionRequest,
    actor: CurrentActor,
    service: ChurchServiceDep,
    request_id: RequestId,
) -> ChurchMutationResponse:
    """Move a record to a new review status.

    409 when the transition is not allowed from the current status (including
    the heritage gate), 403 when the caller's role does not own it.
    """
    result = await service.transition_status(
        actor, church_id, body.status, note=body.note, request_id=request_id
    )
    return _mutation_response(result)


@router.patch("/{church_id}/classification", response_model=ChurchMutationResponse)
async def reclassify_church(
    church_id: str,
    body: ReclassifyRequest,
    actor: CurrentActor,
    service: ChurchServiceDep,
    request_id: RequestId,
) -> ChurchMutationResponse:
    """Change a record's heritage classification (not allowed once approved)."""
    result = await service.reclassify(
        actor, church_id, body.classification, note=body.note, request_id=request_id
    )
    return _mutation_response(result)


@router.get("/{church_id}/history", response_model=AuditLogListResponse)
async def church_history(
    church_id: str,
    actor: CurrentActor,
    service: ChurchServiceDep,
    activity: Annotated[ActivityLogService, Depends(get_activity_log_service)],
    limit: int | None = Query(None, ge=1, description="Max entries (default from config)"),
) -> AuditLogListResponse:
    """Audit entries for one church, newest first."""
    limit = limit or get_settings().audit_query_default_limit
    church = await service.get_church(actor, church_id)
    entries = await activity.church_history(actor, church, limit)
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(e) for e in entries],
        limit=limit,
    )
