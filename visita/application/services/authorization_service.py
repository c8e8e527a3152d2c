"""Authorization service: the single place that maps roles to scopes and transitions.

Every role check the core needs goes through this class; call sites never
branch on ``actor.role`` themselves.

- chancery_office: diocese-scoped reviewer.
- museum_researcher: global role; owns heritage review.
- parish_secretary: submitting party; own parish only.
"""

from __future__ import annotations

from enum import Enum

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.church import ChurchCreate, ChurchResult
from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification, UserRole
from visita.domain.exceptions import AuthorizationException

_S = ChurchStatus

_ROLE_TRANSITIONS: dict[UserRole, frozenset[tuple[ChurchStatus, ChurchStatus]]] = {
    UserRole.CHANCERY_OFFICE: frozenset(
        {
            (_S.PENDING, _S.NEEDS_REVISION),
            (_S.PENDING, _S.HERITAGE_REVIEW),
            (_S.PENDING, _S.APPROVED),
            (_S.NEEDS_REVISION, _S.HERITAGE_REVIEW),
            (_S.NEEDS_REVISION, _S.APPROVED),
        }
    ),
    UserRole.MUSEUM_RESEARCHER: frozenset(
        {
            (_S.HERITAGE_REVIEW, _S.APPROVED),
            (_S.HERITAGE_REVIEW, _S.NEEDS_REVISION),
        }
    ),
    UserRole.PARISH_SECRETARY: frozenset(
        {
            (_S.NEEDS_REVISION, _S.PENDING),
        }
    ),
}


class AuditScope(str, Enum):
    """Which audit log query an actor may run."""

    DIOCESE = "diocese"
    ALL = "all"
    OWN = "own"


class AuthorizationService:
    """Role and scope checks for church records and the audit log."""

    def can_view_diocese(self, actor: ActorContext, diocese: Diocese) -> bool:
        """Global roles see every diocese; others only their own."""
        if actor.role.is_global:
            return True
        return actor.diocese == diocese

    def require_diocese_access(self, actor: ActorContext, diocese: Diocese) -> None:
        """Raise AuthorizationException if the actor cannot see ``diocese``."""
        if not self.can_view_diocese(actor, diocese):
            raise AuthorizationException(resource="diocese", action="read")

    def can_view_church(self, actor: ActorContext, church: ChurchResult) -> bool:
        """Return True if the actor may read this record."""
        if actor.role is UserRole.PARISH_SECRETARY:
            return actor.parish_id is not None and church.parish_id == actor.parish_id
        return self.can_view_diocese(actor, church.diocese)

    def require_church_access(self, actor: ActorContext, church: ChurchResult) -> None:
        """Raise AuthorizationException if the actor may not read this record."""
        if not self.can_view_church(actor, church):
            raise AuthorizationException(resource="church", action="read")

    def can_transition(
        self, actor: ActorContext, church: ChurchResult, target: ChurchStatus
    ) -> bool:
        """Return True if the role owns the edge and the record is in the actor's scope.

        Does not check the transition table itself; that is the state machine's job.
        """
        edges = _ROLE_TRANSITIONS.get(actor.role, frozenset())
        if (church.status, target) not in edges:
            return False
        return self.can_view_church(actor, church)

    def require_transition(
        self, actor: ActorContext, church: ChurchResult, target: ChurchStatus
    ) -> None:
        """Raise AuthorizationException if the actor may not move the record to ``target``."""
        if not self.can_transition(actor, church, target):
            raise AuthorizationException(
                resource="church",
                action=target.value,
                message=(
                    f"Role '{actor.role.value}' may not move church {church.id} "
                    f"from '{church.status.value}' to '{target.value}'"
                ),
            )

    def require_create(self, actor: ActorContext, data: ChurchCreate) -> None:
        """Parish secretaries submit for their own parish; chancery for its diocese."""
        if actor.role is UserRole.PARISH_SECRETARY:
            allowed = (
                actor.parish_id is not None
                and data.parish_id == actor.parish_id
                and actor.diocese == data.diocese
            )
        elif actor.role is UserRole.CHANCERY_OFFICE:
            allowed = actor.diocese == data.diocese
        else:
            allowed = False
        if not allowed:
            raise AuthorizationException(resource="church", action="create")

    def require_reclassify(
        self,
        actor: ActorContext,
        church: ChurchResult,
        classification: HeritageClassification,
    ) -> None:
        """Chancery (own diocese) and museum researchers may change classification.

        Taking a record out of a heritage category (NCT/ICP to anything that
        is not heritage) is reserved to museum researchers: after it the
        heritage gate no longer applies to the record.
        """
        allowed = actor.role in (
            UserRole.CHANCERY_OFFICE,
            UserRole.MUSEUM_RESEARCHER,
        ) and self.can_view_diocese(actor, church.diocese)
        if (
            allowed
            and church.classification.is_heritage
            and not classification.is_heritage
        ):
            allowed = actor.role is UserRole.MUSEUM_RESEARCHER
        if not allowed:
            raise AuthorizationException(resource="church", action="reclassify")

    def audit_scope(self, actor: ActorContext) -> AuditScope:
        """Return the audit log query this actor is limited to."""
        if actor.role.is_global:
            return AuditScope.ALL
        if actor.role is UserRole.CHANCERY_OFFICE:
            return AuditScope.DIOCESE
        return AuditScope.OWN

    def require_audit_diocese(self, actor: ActorContext, diocese: Diocese) -> None:
        """Raise unless the actor may read the audit log of ``diocese``."""
        scope = self.audit_scope(actor)
        if scope is AuditScope.ALL:
            return
        if scope is AuditScope.DIOCESE and actor.diocese == diocese:
            return
        raise AuthorizationException(resource="audit_log", action="read")
