"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Connectivity failures, 5xx/429 answers and any other unexpected 4xx answer
surface as BackendUnavailableException; there is no automatic retry.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from visita.domain.exceptions import BackendUnavailableException
from visita.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
)
from visita.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def _is_unavailable(status_code: int) -> bool:
    return status_code >= 500 or status_code == 429


def _error_detail(resp: httpx.Response) -> tuple[str, str]:
    """Return (status, message) from a Firestore error body, or empty strings."""
    try:
        error = resp.json().get("error") or {}
    except (ValueError, AttributeError):
        return "", ""
    if not isinstance(error, dict):
        return "", ""
    return str(error.get("status") or ""), str(error.get("message") or "")


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    conditional: bool = False,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None.

    With ``conditional`` a failed precondition (400 FAILED_PRECONDITION or
    409 ABORTED) raises PreconditionFailedError instead of a backend error.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    operation = f"{method} {url.removeprefix(_BASE + '/')}"
    try:
        if method == "GET":
            resp = await client.get(url, headers=headers)
        elif method == "PATCH":
            resp = await client.patch(url, headers=headers, json=body)
        elif method == "POST":
            resp = await client.post(url, headers=headers, json=body)
        else:
            raise ValueError(f"Unsupported method: {method!r}")
    except httpx.TransportError as e:
        raise BackendUnavailableException(operation, reason=str(e)) from e
    if resp.status_code == 404:
        return None
    if resp.status_code in (200, 204):
        raw = resp.content
        return json.loads(raw.decode()) if raw else {}
    status, message = _error_detail(resp)
    if conditional and (
        (resp.status_code == 400 and status == "FAILED_PRECONDITION")
        or (resp.status_code == 409 and status == "ABORTED")
    ):
        raise PreconditionFailedError(message or "Precondition failed")
    if resp.status_code == 409:
        raise DocumentExistsError(message or "Document already exists")
    reason = f"HTTP {resp.status_code}"
    if status:
        reason += f" {status}"
    if message:
        reason += f": {message}"
    if not _is_unavailable(resp.status_code):
        logger.error("Firestore rejected %s: %s", operation, reason)
    raise BackendUnavailableException(operation, reason=reason)


class DocumentExistsError(Exception):
    """Raised when createDocument returns 409 (document ID already exists)."""


class PreconditionFailedError(Exception):
    """Raised when a conditional write finds the document changed since it was read."""


class DocumentSnapshot:
    """Snapshot of a document (id + data + server update time)."""

    def __init__(self, id_: str, data: dict, update_time: str | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data


def _snapshot_from_rest(doc: dict) -> DocumentSnapshot:
    name = doc.get("name", "")
    doc_id = name.split("/")[-1] if name else ""
    return DocumentSnapshot(
        doc_id, decode_document(doc.get("fields")), doc.get("updateTime")
    )


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    async def update(
        self, data: dict[str, Any], update_time: str | None = None
    ) -> DocumentSnapshot | None:
        """Write only the given fields of an existing document.

        Uses an update mask so other fields are untouched. With ``update_time``
        the write only applies if the document's last update time still
        equals it (PreconditionFailedError otherwise); without it an exists
        precondition keeps a missing document from being created. Returns the
        document after the write, or None if it does not exist.
        """
        mask = "&".join(
            f"updateMask.fieldPaths={quote(field, safe='')}" for field in data
        )
        if update_time:
            precondition = f"currentDocument.updateTime={quote(update_time, safe='')}"
        else:
            precondition = "currentDocument.exists=true"
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}?{mask}&{precondition}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            conditional=bool(update_time),
        )
        if not out:
            return None
        return _snapshot_from_rest(out)

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(
            self.id, decode_document(out.get("fields")), out.get("updateTime")
        )


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array-contains": "ARRAY_CONTAINS",
}

_DIRECTIONS = {"ASCENDING", "DESCENDING"}


class Query:
    """Fluent query builder for a collection; runs via runQuery (filter/order/limit on server).

    Multiple ``where`` calls are combined with AND.
    """

    def __init__(
        self,
        client: "FirestoreRESTClient",
        parent: str,
        collection_id: str,
    ):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []
        self._orders: list[dict[str, Any]] = []
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> "Query":
        self._filters.append(
            {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": _OP_MAP.get(op, op),
                    "value": _encode_value(value),
                }
            }
        )
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> "Query":
        if direction not in _DIRECTIONS:
            raise ValueError(f"direction must be one of {sorted(_DIRECTIONS)}")
        self._orders.append({"field": {"fieldPath": field}, "direction": direction})
        return self

    def limit(self, n: int) -> "Query":
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        """Return the runQuery ``structuredQuery`` body for this query."""
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": list(self._filters)}
            }
        if self._orders:
            structured["orderBy"] = list(self._orders)
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        url = f"{_BASE}/{self._parent}:runQuery"
        resp = await _request_async(
            self._client._http,
            url,
            method="POST",
            body={"structuredQuery": self.to_structured_query()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield _snapshot_from_rest(item["document"])


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> str | None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists).

        Returns the new document's server update time.
        """
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        out = await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )
        return out.get("updateTime") if out else None

    def query(self) -> Query:
        """Start an unfiltered query on this collection."""
        parent = self._path.rsplit("/", 1)[0]
        collection_id = self._path.split("/")[-1]
        return Query(self._client, parent, collection_id)

    def where(self, field: str, op: str, value: Any) -> Query:
        """Start a query with a filter. Chain .where(), .order_by(), .limit(), then .stream()."""
        return self.query().where(field, op, value)


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = (
            http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        )
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except Exception as e:
            raise BackendUnavailableException("token refresh", reason=str(e)) from e

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
