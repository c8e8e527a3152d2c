"""Firestore-backed church repository (implements IChurchRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from visita.application.dtos.church import ChurchCreate, ChurchResult, StatusUpdate
from visita.domain.enums import ChurchStatus, Diocese, HeritageClassification
from visita.domain.exceptions import ConcurrentModificationException
from visita.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
    PreconditionFailedError,
)
from visita.infrastructure.firebase.collections import COLLECTION_CHURCHES
from visita.shared.utils.datetime import ensure_utc, utc_now
from visita.shared.utils.generators import generate_cuid


def _to_result(
    doc_id: str, data: dict[str, Any], version: str | None = None
) -> ChurchResult:
    return ChurchResult(
        id=doc_id,
        name=data.get("name", ""),
        diocese=Diocese(data["diocese"]),
        municipality=data.get("municipality", ""),
        classification=HeritageClassification(data.get("classification", "unknown")),
        status=ChurchStatus(data.get("status", ChurchStatus.PENDING.value)),
        parish_id=data.get("parish_id"),
        status_note=data.get("status_note"),
        status_changed_at=ensure_utc(data.get("status_changed_at")),
        status_changed_by=data.get("status_changed_by"),
        heritage_reviewed=bool(data.get("heritage_reviewed", False)),
        created_at=ensure_utc(data.get("created_at")),
        updated_at=ensure_utc(data.get("updated_at")),
        version=version,
    )


class FirestoreChurchRepository:
    """Church records in the ``churches`` collection. No delete."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_CHURCHES)

    async def get_by_id(self, church_id: str) -> ChurchResult | None:
        """Return church by ID."""
        doc = await self._coll.document(church_id).get()
        if not doc:
            return None
        return _to_result(doc.id, doc.to_dict(), doc.update_time)

    async def list_by_diocese(
        self, diocese: Diocese, statuses: frozenset[ChurchStatus]
    ) -> list[ChurchResult]:
        """Return churches of the diocese with status in ``statuses`` (server-side filter)."""
        q = self._coll.where("diocese", "==", diocese.value).where(
            "status", "in", sorted(s.value for s in statuses)
        )
        return [_to_result(s.id, s.to_dict(), s.update_time) async for s in q.stream()]

    async def create(self, data: ChurchCreate, created_by: str) -> ChurchResult:
        """Create a pending church with a new CUID document id."""
        church_id = generate_cuid()
        now = utc_now()
        doc = {
            "name": data.name.strip(),
            "diocese": data.diocese.value,
            "municipality": data.municipality.strip(),
            "classification": data.classification.value,
            "status": ChurchStatus.PENDING.value,
            "parish_id": data.parish_id,
            "status_note": None,
            "status_changed_at": now,
            "status_changed_by": created_by,
            "heritage_reviewed": False,
            "created_by": created_by,
            "created_at": now,
            "updated_at": now,
        }
        update_time = await self._coll.create(church_id, doc)
        return _to_result(church_id, doc, update_time)

    async def _conditional_update(
        self,
        church_id: str,
        fields: dict[str, Any],
        expected_version: str | None,
    ) -> ChurchResult | None:
        """Masked update guarded by the read's update time when one is given."""
        try:
            snapshot: DocumentSnapshot | None = await self._coll.document(
                church_id
            ).update(fields, update_time=expected_version)
        except PreconditionFailedError as e:
            raise ConcurrentModificationException("church", church_id) from e
        if snapshot is None:
            return None
        return _to_result(church_id, snapshot.to_dict(), snapshot.update_time)

    async def update_status(
        self,
        church_id: str,
        update: StatusUpdate,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        """Write status, note, timestamp and actor; None if the church does not exist."""
        return await self._conditional_update(
            church_id,
            {
                "status": update.status.value,
                "status_note": update.note,
                "status_changed_at": update.changed_at,
                "status_changed_by": update.changed_by,
                "heritage_reviewed": update.heritage_reviewed,
                "updated_at": update.changed_at,
            },
            expected_version,
        )

    async def update_classification(
        self,
        church_id: str,
        classification: HeritageClassification,
        changed_by: str,
        changed_at: datetime,
        expected_version: str | None = None,
    ) -> ChurchResult | None:
        """Write a new classification; None if the church does not exist."""
        return await self._conditional_update(
            church_id,
            {
                "classification": classification.value,
                "classification_changed_by": changed_by,
                "updated_at": changed_at,
            },
            expected_version,
        )
