"""Activity log: audit reads scoped by the viewer's role.

The scope decides which underlying query runs; the optional action filter
is applied afterwards and only narrows what is displayed.
"""

from __future__ import annotations

from collections.abc import Iterable

from visita.application.dtos.actor import ActorContext
from visita.application.dtos.audit_log import AuditLogEntry, AuditLogSummary
from visita.application.dtos.church import ChurchResult
from visita.application.services.audit_log_service import (
    AuditLogService,
    filter_by_actions,
)
from visita.application.services.authorization_service import (
    AuditScope,
    AuthorizationService,
)
from visita.domain.enums import Diocese
from visita.domain.exceptions import AuthorizationException
from visita.shared.enums import AuditAction, ResourceType


class ActivityLogService:
    """Role-scoped views over the audit log."""

    def __init__(
        self,
        audit_service: AuditLogService,
        authorizer: AuthorizationService | None = None,
    ) -> None:
        self.audit_service = audit_service
        self.authorizer = authorizer or AuthorizationService()

    async def list_for(
        self,
        actor: ActorContext,
        limit: int,
        diocese: Diocese | None = None,
        actions: Iterable[AuditAction] | None = None,
    ) -> list[AuditLogEntry]:
        """Entries the actor may see, newest first.

        - global roles: everything, or one diocese when ``diocese`` is given
        - diocese-scoped roles: their diocese (``diocese`` defaults to it)
        - submitting parties: own actions plus actions on their parish
        """
        scope = self.authorizer.audit_scope(actor)
        if scope is AuditScope.OWN:
            if diocese is not None:
                raise AuthorizationException(resource="audit_log", action="read")
            entries = await self.audit_service.query_by_actor_or_resource(
                actor.uid, actor.parish_id, limit
            )
        elif scope is AuditScope.ALL and diocese is None:
            entries = await self.audit_service.query_all(limit)
        else:
            target = diocese or actor.diocese
            if target is None:
                raise AuthorizationException(resource="audit_log", action="read")
            self.authorizer.require_audit_diocese(actor, target)
            entries = await self.audit_service.query_by_diocese(target.value, limit)
        return filter_by_actions(entries, actions)

    async def summary_for(
        self,
        actor: ActorContext,
        limit: int,
        diocese: Diocese | None = None,
    ) -> AuditLogSummary:
        """Counts over the entries ``list_for`` would return."""
        entries = await self.list_for(actor, limit, diocese=diocese)
        return self.audit_service.summarize(entries)

    async def church_history(
        self, actor: ActorContext, church: ChurchResult, limit: int
    ) -> list[AuditLogEntry]:
        """Review history of one church; the actor must be able to see the church."""
        self.authorizer.require_church_access(actor, church)
        return await self.audit_service.resource_history(
            ResourceType.CHURCH, church.id, limit
        )
