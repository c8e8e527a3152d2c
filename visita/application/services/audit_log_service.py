"""Audit log service: append entries and answer scoped queries (implements the audit contract).

Entries are append-only. ``record`` never fails silently: any persistence
error is raised as AuditWriteFailedException. Queries return entries newest
first, truncated to ``limit``; there is no pagination cursor.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from visita.application.dtos.audit_log import (
    AuditLogEntry,
    AuditLogEntryDraft,
    AuditLogSummary,
)
from visita.application.interfaces.repositories import IAuditLogRepository
from visita.domain.exceptions import (
    AuditWriteFailedException,
    ValidationException,
)
from visita.shared.enums import AuditAction, ResourceType
from visita.shared.telemetry.logging import get_logger
from visita.shared.telemetry.tracing import add_span_attributes, traced
from visita.shared.utils.datetime import MonotonicUTCClock, process_clock
from visita.shared.utils.generators import generate_time_ordered_id

logger = get_logger(__name__)


def _newest_first(entries: Iterable[AuditLogEntry]) -> list[AuditLogEntry]:
    """Sort by (timestamp, id) descending; ids are time-ordered so ties are stable."""
    return sorted(entries, key=lambda e: (e.timestamp, e.id), reverse=True)


def filter_by_actions(
    entries: Iterable[AuditLogEntry],
    allowed_actions: Iterable[AuditAction | str] | None,
) -> list[AuditLogEntry]:
    """Keep only entries whose action is in ``allowed_actions`` (None keeps all).

    Display filtering only. It runs after retrieval, on data the caller has
    already been allowed to read, so it must never be used as an access
    control check; scope the query itself through AuthorizationService.
    """
    if allowed_actions is None:
        return list(entries)
    allowed = {AuditAction(a) for a in allowed_actions}
    return [e for e in entries if e.action in allowed]


class AuditLogService:
    """Records privileged actions and serves diocese / actor / global views."""

    def __init__(
        self,
        audit_repo: IAuditLogRepository,
        max_limit: int = 500,
        clock: MonotonicUTCClock | None = None,
    ) -> None:
        self.audit_repo = audit_repo
        self.max_limit = max_limit
        self._clock = clock or process_clock

    def _check_limit(self, limit: int) -> None:
        if limit < 1 or limit > self.max_limit:
            raise ValidationException(
                f"limit must be between 1 and {self.max_limit}", field="limit"
            )

    @traced("audit_log.record")
    async def record(self, draft: AuditLogEntryDraft) -> AuditLogEntry:
        """Assign id and timestamp, persist, and return the entry.

        Raises:
            AuditWriteFailedException: when the entry could not be persisted.
        """
        timestamp = self._clock.now()
        entry = AuditLogEntry(
            id=generate_time_ordered_id(timestamp),
            actor=draft.actor,
            action=draft.action,
            resource_type=draft.resource_type,
            resource_id=draft.resource_id,
            diocese=draft.diocese,
            timestamp=timestamp,
            resource_name=draft.resource_name,
            changes=draft.changes,
            parish_id=draft.parish_id,
            metadata=dict(draft.metadata),
            session_id=draft.session_id,
        )
        add_span_attributes(audit_action=entry.action.value, audit_id=entry.id)
        try:
            await self.audit_repo.append(entry)
        except Exception as e:
            raise AuditWriteFailedException(
                draft.action.value, draft.resource_id, reason=str(e)
            ) from e
        logger.info(
            "Audit %s on %s/%s by %s (%s)",
            entry.action.value,
            entry.resource_type.value,
            entry.resource_id,
            entry.actor.email,
            entry.id,
        )
        return entry

    async def query_by_diocese(self, diocese: str, limit: int) -> list[AuditLogEntry]:
        """Entries whose denormalized diocese equals ``diocese``, newest first."""
        self._check_limit(limit)
        rows = await self.audit_repo.list_by_diocese(diocese, limit)
        return _newest_first(e for e in rows if e.diocese == diocese)[:limit]

    async def query_all(self, limit: int) -> list[AuditLogEntry]:
        """All entries, newest first."""
        self._check_limit(limit)
        rows = await self.audit_repo.list_all(limit)
        return _newest_first(rows)[:limit]

    async def query_by_actor_or_resource(
        self, actor_id: str, resource_owner_id: str | None, limit: int
    ) -> list[AuditLogEntry]:
        """Actions by ``actor_id`` plus actions on resources owned by ``resource_owner_id``.

        The store has no OR query, so both sides are fetched with the same
        limit, merged by id, sorted newest first and truncated.
        """
        self._check_limit(limit)
        merged: dict[str, AuditLogEntry] = {
            e.id: e for e in await self.audit_repo.list_by_actor(actor_id, limit)
        }
        if resource_owner_id:
            for e in await self.audit_repo.list_by_parish(resource_owner_id, limit):
                merged.setdefault(e.id, e)
        return _newest_first(merged.values())[:limit]

    async def resource_history(
        self, resource_type: ResourceType, resource_id: str, limit: int
    ) -> list[AuditLogEntry]:
        """All entries for one resource (e.g. a church's review history), newest first."""
        self._check_limit(limit)
        rows = await self.audit_repo.list_by_resource(resource_type, resource_id, limit)
        return _newest_first(rows)[:limit]

    async def actor_history(self, actor_id: str, limit: int) -> list[AuditLogEntry]:
        """Entries written by one actor, newest first."""
        self._check_limit(limit)
        rows = await self.audit_repo.list_by_actor(actor_id, limit)
        return _newest_first(rows)[:limit]

    @staticmethod
    def summarize(entries: Iterable[AuditLogEntry]) -> AuditLogSummary:
        """Count entries by action, resource type and actor."""
        items = list(entries)
        timestamps = [e.timestamp for e in items]
        return AuditLogSummary(
            total=len(items),
            by_action=dict(Counter(e.action.value for e in items)),
            by_resource_type=dict(Counter(e.resource_type.value for e in items)),
            by_actor=dict(Counter(e.actor.uid for e in items)),
            earliest=min(timestamps) if timestamps else None,
            latest=max(timestamps) if timestamps else None,
        )
