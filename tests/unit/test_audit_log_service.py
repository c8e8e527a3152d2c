"""AuditLogService: append contract, ordering, limits and scoped queries."""

from datetime import UTC, datetime, timedelta

import pytest

from visita.application.dtos.audit_log import (
    AuditActor,
    AuditLogEntry,
    AuditLogEntryDraft,
    FieldChange,
)
from visita.application.services.audit_log_service import (
    AuditLogService,
    filter_by_actions,
)
from visita.domain.exceptions import AuditWriteFailedException, ValidationException
from visita.infrastructure.memory import InMemoryAuditLogRepository, InMemoryStore
from visita.shared.enums import AuditAction, ResourceType
from visita.shared.utils.datetime import MonotonicUTCClock


def _actor(uid: str = "chancery-tag", diocese: str | None = "tagbilaran") -> AuditActor:
    return AuditActor(
        uid=uid,
        name="Reviewer",
        email=f"{uid}@example.com",
        role="chancery_office",
        diocese=diocese,
    )


def _draft(
    action: AuditAction = AuditAction.CHURCH_APPROVE,
    resource_id: str = "c1",
    diocese: str | None = "tagbilaran",
    actor: AuditActor | None = None,
    parish_id: str | None = None,
) -> AuditLogEntryDraft:
    return AuditLogEntryDraft(
        actor=actor or _actor(),
        action=action,
        resource_type=ResourceType.CHURCH,
        resource_id=resource_id,
        diocese=diocese,
        parish_id=parish_id,
        changes=(FieldChange("status", "pending", "approved"),),
    )


class _FailingAuditRepo(InMemoryAuditLogRepository):
    async def append(self, entry: AuditLogEntry) -> None:
        raise RuntimeError("store rejected write")


async def test_record_assigns_id_and_timestamp(audit_service: AuditLogService) -> None:
    entry = await audit_service.record(_draft())
    assert entry.id
    assert entry.timestamp.tzinfo is not None
    assert entry.action is AuditAction.CHURCH_APPROVE
    assert entry.changes == (FieldChange("status", "pending", "approved"),)
    stored = await audit_service.query_all(10)
    assert [e.id for e in stored] == [entry.id]


async def test_timestamps_strictly_increase(audit_service: AuditLogService) -> None:
    """Back-to-back records never share a timestamp, and ids follow the same order."""
    entries = [await audit_service.record(_draft(resource_id=f"c{i}")) for i in range(20)]
    for earlier, later in zip(entries, entries[1:]):
        assert later.timestamp > earlier.timestamp
        assert later.id > earlier.id


def test_clock_steps_past_a_stalled_wall_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    frozen = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)
    monkeypatch.setattr("visita.shared.utils.datetime.utc_now", lambda: frozen)
    clock = MonotonicUTCClock()
    first, second = clock.now(), clock.now()
    assert first == frozen
    assert second == frozen + timedelta(microseconds=1)


async def test_record_failure_raises_audit_write_failed(store: InMemoryStore) -> None:
    service = AuditLogService(_FailingAuditRepo(store))
    with pytest.raises(AuditWriteFailedException) as exc_info:
        await service.record(_draft())
    assert exc_info.value.details["action"] == "church.approve"
    assert exc_info.value.details["resource_id"] == "c1"
    assert "store rejected write" in exc_info.value.details["reason"]
    assert store.audit_logs == {}


@pytest.mark.parametrize("limit", [0, -1, 501])
async def test_limit_out_of_range_is_rejected(
    audit_service: AuditLogService, limit: int
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await audit_service.query_all(limit)
    assert exc_info.value.details == {"field": "limit"}


async def test_query_by_diocese_returns_only_that_diocese_newest_first(
    audit_service: AuditLogService,
) -> None:
    for i in range(5):
        await audit_service.record(_draft(resource_id=f"tag{i}", diocese="tagbilaran"))
        await audit_service.record(_draft(resource_id=f"tal{i}", diocese="talibon"))

    entries = await audit_service.query_by_diocese("tagbilaran", 3)

    assert len(entries) == 3
    assert all(e.diocese == "tagbilaran" for e in entries)
    assert [e.resource_id for e in entries] == ["tag4", "tag3", "tag2"]
    timestamps = [e.timestamp for e in entries]
    assert timestamps == sorted(timestamps, reverse=True)


async def test_query_by_diocese_with_fewer_entries_than_limit(
    audit_service: AuditLogService,
) -> None:
    await audit_service.record(_draft(diocese="talibon"))
    assert len(await audit_service.query_by_diocese("talibon", 50)) == 1
    assert await audit_service.query_by_diocese("tagbilaran", 50) == []


async def test_query_by_actor_or_resource_merges_without_duplicates(
    audit_service: AuditLogService,
) -> None:
    secretary = _actor(uid="secretary-loboc")
    own_on_parish = await audit_service.record(
        _draft(actor=secretary, parish_id="parish-loboc", resource_id="c1")
    )
    other_on_parish = await audit_service.record(
        _draft(resource_id="c1", parish_id="parish-loboc")
    )
    own_elsewhere = await audit_service.record(
        _draft(actor=secretary, parish_id="parish-baclayon", resource_id="c2")
    )
    await audit_service.record(_draft(resource_id="c3", parish_id="parish-baclayon"))

    entries = await audit_service.query_by_actor_or_resource(
        "secretary-loboc", "parish-loboc", 50
    )

    assert [e.id for e in entries] == [
        own_elsewhere.id,
        other_on_parish.id,
        own_on_parish.id,
    ]


async def test_query_by_actor_without_owner_id(audit_service: AuditLogService) -> None:
    await audit_service.record(_draft(actor=_actor(uid="u1")))
    await audit_service.record(_draft(actor=_actor(uid="u2")))
    entries = await audit_service.query_by_actor_or_resource("u1", None, 50)
    assert [e.actor.uid for e in entries] == ["u1"]


async def test_resource_and_actor_history(audit_service: AuditLogService) -> None:
    await audit_service.record(_draft(resource_id="c1", actor=_actor(uid="u1")))
    await audit_service.record(_draft(resource_id="c2", actor=_actor(uid="u1")))
    await audit_service.record(_draft(resource_id="c1", actor=_actor(uid="u2")))

    history = await audit_service.resource_history(ResourceType.CHURCH, "c1", 50)
    assert [e.actor.uid for e in history] == ["u2", "u1"]
    by_actor = await audit_service.actor_history("u1", 50)
    assert [e.resource_id for e in by_actor] == ["c2", "c1"]


async def test_summarize(audit_service: AuditLogService) -> None:
    await audit_service.record(_draft(action=AuditAction.CHURCH_APPROVE))
    await audit_service.record(_draft(action=AuditAction.CHURCH_APPROVE))
    await audit_service.record(
        _draft(action=AuditAction.CHURCH_REQUEST_REVISION, actor=_actor(uid="u2"))
    )
    entries = await audit_service.query_all(50)

    summary = AuditLogService.summarize(entries)

    assert summary.total == 3
    assert summary.by_action == {"church.approve": 2, "church.request_revision": 1}
    assert summary.by_resource_type == {"church": 3}
    assert summary.by_actor == {"chancery-tag": 2, "u2": 1}
    assert summary.earliest < summary.latest


def test_summarize_empty() -> None:
    summary = AuditLogService.summarize([])
    assert summary.total == 0
    assert summary.earliest is None and summary.latest is None


async def test_filter_by_actions(audit_service: AuditLogService) -> None:
    await audit_service.record(_draft(action=AuditAction.CHURCH_APPROVE))
    await audit_service.record(_draft(action=AuditAction.CHURCH_SUBMIT))
    entries = await audit_service.query_all(50)

    assert filter_by_actions(entries, None) == entries
    kept = filter_by_actions(entries, ["church.submit"])
    assert [e.action for e in kept] == [AuditAction.CHURCH_SUBMIT]
    assert filter_by_actions(entries, []) == []
