"""Church record operations: submit, list, transition, reclassify.

Every mutation is followed by exactly one audit entry. The audit write is
attempted only after the mutation persisted; if it fails the mutation is
kept and the caller gets a degraded-success result with a warning.
"""

from __future__ import annotations

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.audit_log import AuditActor, AuditLogEntryDraft, FieldChange
from visita.application.dtos.church import (
    ChurchCreate,
    ChurchResult,
    MutationResult,
    StatusUpdate,
    TransitionResult,
)
from visita.application.interfaces.repositories import IChurchRepository
from visita.application.services.audit_log_service import AuditLogService
from visita.application.services.authorization_service import AuthorizationService
from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification
from visita.domain.exceptions import (
    AuditWriteFailedException,
    ConcurrentModificationException,
    InvalidTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from visita.domain.workflow import allowed_targets, validate_transition
from visita.shared.enums import AuditAction, ResourceType
from visita.shared.telemetry.logging import get_logger
from visita.shared.telemetry.tracing import add_span_attributes, traced
from visita.shared.utils.datetime import utc_now

logger = get_logger(__name__)

_STATUS_ACTIONS: dict[ChurchStatus, AuditAction] = {
    ChurchStatus.PENDING: AuditAction.CHURCH_SUBMIT,
    ChurchStatus.NEEDS_REVISION: AuditAction.CHURCH_REQUEST_REVISION,
    ChurchStatus.HERITAGE_REVIEW: AuditAction.CHURCH_FORWARD_HERITAGE,
    ChurchStatus.APPROVED: AuditAction.CHURCH_APPROVE,
}

_NOTE_MAX_LENGTH = 2000


def audit_action_for_status(status: ChurchStatus) -> AuditAction:
    """Return the audit action recorded when a church enters ``status``."""
    return _STATUS_ACTIONS[status]


def audit_actor_from(actor: ActorContext) -> AuditActor:
    """Denormalize the actor for an audit entry."""
    return AuditActor(
        uid=actor.uid,
        name=actor.name,
        email=actor.email,
        role=actor.role.value,
        diocese=actor.diocese.value if actor.diocese else None,
    )


def _clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    note = note.strip()
    if len(note) > _NOTE_MAX_LENGTH:
        raise ValidationException(
            f"note must not exceed {_NOTE_MAX_LENGTH} characters", field="note"
        )
    return note or None


class ChurchRecordService:
    """Owns the lifecycle of church records and pairs every mutation with an audit entry."""

    def __init__(
        self,
        church_repo: IChurchRepository,
        audit_service: AuditLogService,
        authorizer: AuthorizationService | None = None,
    ) -> None:
        self.church_repo = church_repo
        self.audit_service = audit_service
        self.authorizer = authorizer or AuthorizationService()

    async def _load(self, church_id: str) -> ChurchResult:
        church = await self.church_repo.get_by_id(church_id)
        if church is None:
            raise ResourceNotFoundException("church", church_id)
        return church

    async def _audit(
        self, church: ChurchResult, draft: AuditLogEntryDraft
    ) -> MutationResult:
        """Write the audit entry for a mutation that already persisted."""
        try:
            entry = await self.audit_service.record(draft)
        except AuditWriteFailedException as e:
            logger.error(
                "Church %s mutated but audit %s was not written: %s",
                church.id,
                draft.action.value,
                e.details.get("reason", e.message),
            )
            return MutationResult(
                church=church,
                audit_entry=None,
                warnings=[
                    f"{draft.action.value} on church {church.id} succeeded "
                    f"but its audit entry could not be written: {e.message}"
                ],
            )
        return MutationResult(church=church, audit_entry=entry)

    async def create_church(
        self,
        actor: ActorContext,
        data: ChurchCreate,
        request_id: str | None = None,
    ) -> MutationResult:
        """Submit a new church record in pending status."""
        if not data.name or not data.name.strip():
            raise ValidationException("Church name is required", field="name")
        if not data.municipality or not data.municipality.strip():
            raise ValidationException("Municipality is required", field="municipality")
        self.authorizer.require_create(actor, data)

        church = await self.church_repo.create(data, created_by=actor.uid)
        logger.info("Church %s submitted by %s", church.id, actor.uid)
        draft = AuditLogEntryDraft(
            actor=audit_actor_from(actor),
            action=AuditAction.CHURCH_CREATE,
            resource_type=ResourceType.CHURCH,
            resource_id=church.id,
            resource_name=church.name,
            diocese=church.diocese.value,
            parish_id=church.parish_id,
            changes=(FieldChange("status", None, church.status.value),),
            session_id=request_id,
        )
        return await self._audit(church, draft)

    async def get_church(self, actor: ActorContext, church_id: str) -> ChurchResult:
        """Return one record if the actor may see it."""
        church = await self._load(church_id)
        self.authorizer.require_church_access(actor, church)
        return church

    async def list_by_diocese(
        self,
        actor: ActorContext,
        diocese: Diocese,
        statuses: set[ChurchStatus] | frozenset[ChurchStatus] | None = None,
    ) -> list[ChurchResult]:
        """Records of ``diocese`` with status in ``statuses``.

        ``None`` means every status; an empty set matches nothing. Sorted by
        name then id so the order is stable for a given result set. Parish
        secretaries only get their own parish's records.
        """
        self.authorizer.require_diocese_access(actor, diocese)
        wanted = frozenset(ChurchStatus) if statuses is None else frozenset(statuses)
        if not wanted:
            return []
        rows = await self.church_repo.list_by_diocese(diocese, wanted)
        visible = [
            c
            for c in rows
            if c.diocese == diocese
            and c.status in wanted
            and self.authorizer.can_view_church(actor, c)
        ]
        return sorted(visible, key=lambda c: (c.name.lower(), c.id))

    def available_transitions(
        self, actor: ActorContext, church: ChurchResult
    ) -> list[ChurchStatus]:
        """Statuses this actor may move the record to right now."""
        return sorted(
            (
                target
                for target in allowed_targets(church.status, church.classification)
                if self.authorizer.can_transition(actor, church, target)
            ),
            key=lambda s: ChurchStatus.values().index(s.value),
        )

    @traced("church.transition_status")
    async def transition_status(
        self,
        actor: ActorContext,
        church_id: str,
        new_status: ChurchStatus,
        note: str | None = None,
        request_id: str | None = None,
    ) -> TransitionResult:
        """Move a record to ``new_status`` and write its audit entry.

        Raises:
            ResourceNotFoundException: unknown id.
            InvalidTransitionException: pair not in the table, or heritage gate.
            AuthorizationException: role or scope does not own the edge.
            BackendUnavailableException: store unreachable (nothing written).

        The write is conditional on the revision that was validated; if the
        record changed in between, nothing is written and the call fails
        with InvalidTransitionException (reason ``concurrent_modification``).
        """
        note = _clean_note(note)
        church = await self._load(church_id)
        add_span_attributes(
            church_status=church.status.value, target_status=new_status.value
        )
        validate_transition(church.status, new_status, church.classification)
        self.authorizer.require_transition(actor, church, new_status)

        old_status = church.status
        update = StatusUpdate(
            status=new_status,
            note=note,
            changed_by=actor.uid,
            changed_at=utc_now(),
            heritage_reviewed=(
                church.heritage_reviewed or new_status is ChurchStatus.HERITAGE_REVIEW
            ),
        )
        try:
            updated = await self.church_repo.update_status(
                church_id, update, expected_version=church.version
            )
        except ConcurrentModificationException as e:
            logger.warning(
                "Church %s changed during %s -> %s by %s; nothing written",
                church_id,
                old_status.value,
                new_status.value,
                actor.uid,
            )
            raise InvalidTransitionException(
                old_status.value,
                new_status.value,
                reason="concurrent_modification",
                message=f"Church {church_id} was modified by another request; reload and retry",
            ) from e
        if updated is None:
            raise ResourceNotFoundException("church", church_id)
        logger.info(
            "Church %s: %s -> %s by %s",
            church_id,
            old_status.value,
            new_status.value,
            actor.uid,
        )

        metadata = {"note": note} if note else {}
        draft = AuditLogEntryDraft(
            actor=audit_actor_from(actor),
            action=audit_action_for_status(new_status),
            resource_type=ResourceType.CHURCH,
            resource_id=church_id,
            resource_name=church.name,
            diocese=church.diocese.value,
            parish_id=church.parish_id,
            changes=(FieldChange("status", old_status.value, new_status.value),),
            metadata=metadata,
            session_id=request_id,
        )
        return await self._audit(updated, draft)

    @traced("church.reclassify")
    async def reclassify(
        self,
        actor: ActorContext,
        church_id: str,
        classification: HeritageClassification,
        note: str | None = None,
        request_id: str | None = None,
    ) -> MutationResult:
        """Change a record's heritage classification.

        Approved records cannot be reclassified: moving an approved
        non-heritage record into a heritage category would leave a heritage
        record that never went through heritage review. Only museum
        researchers may take a record out of a heritage category. Like
        ``transition_status`` the write is conditional on the revision read,
        so a concurrent transition and reclassification cannot both land.
        """
        note = _clean_note(note)
        church = await self._load(church_id)
        if church.status is ChurchStatus.APPROVED:
            raise InvalidTransitionException(
                church.status.value,
                church.status.value,
                reason="approved_is_terminal",
                message=f"Approved church {church_id} cannot be reclassified",
                classification=classification.value,
            )
        self.authorizer.require_reclassify(actor, church, classification)
        if classification is church.classification:
            raise ValidationException(
                f"Church is already classified as {classification.value}",
                field="classification",
            )

        try:
            updated = await self.church_repo.update_classification(
                church_id,
                classification,
                changed_by=actor.uid,
                changed_at=utc_now(),
                expected_version=church.version,
            )
        except ConcurrentModificationException as e:
            logger.warning(
                "Church %s changed during reclassification by %s; nothing written",
                church_id,
                actor.uid,
            )
            raise InvalidTransitionException(
                church.status.value,
                church.status.value,
                reason="concurrent_modification",
                message=f"Church {church_id} was modified by another request; reload and retry",
                classification=classification.value,
            ) from e
        if updated is None:
            raise ResourceNotFoundException("church", church_id)

        draft = AuditLogEntryDraft(
            actor=audit_actor_from(actor),
            action=AuditAction.HERITAGE_RECLASSIFY,
            resource_type=ResourceType.CHURCH,
            resource_id=church_id,
            resource_name=church.name,
            diocese=church.diocese.value,
            parish_id=church.parish_id,
            changes=(
                FieldChange(
                    "classification",
                    church.classification.value,
                    classification.value,
                ),
            ),
            metadata={"note": note} if note else {},
            session_id=request_id,
        )
        return await self._audit(updated, draft)
