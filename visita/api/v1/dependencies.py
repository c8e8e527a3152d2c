"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for repositories, services and the current
actor. Routes depend only on these, never on infrastructure directly.

When database_backend is 'firestore', repositories use the Firestore REST
client; when it is 'memory', they share the app's InMemoryStore.
Switch backends via DATABASE_BACKEND in config.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from visita.application.dtos.actor import ActorContext
from visita.application.interfaces.repositories import (
    IAuditLogRepository,
    IChurchRepository,
    IUserProfileRepository,
)
from visita.application.interfaces.services import ITokenVerifier
from visita.application.services.audit_log_service import AuditLogService
from visita.application.services.authorization_service import AuthorizationService
from visita.application.use_cases.audit import ActivityLogService
from visita.application.use_cases.churches import ChurchRecordService
from visita.core.config import Settings, get_settings
from visita.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BackendUnavailableException,
)
from visita.infrastructure.firebase._rest_client import FirestoreRESTClient
from visita.infrastructure.firebase.client import get_firestore_client
from visita.infrastructure.firebase.repositories import (
    FirestoreAuditLogRepository,
    FirestoreChurchRepository,
    FirestoreUserProfileRepository,
)
from visita.infrastructure.memory import (
    InMemoryAuditLogRepository,
    InMemoryChurchRepository,
    InMemoryStore,
    InMemoryUserProfileRepository,
)
from visita.infrastructure.security import FirebaseTokenVerifier
from visita.middleware.request_id import get_request_id

_http_bearer = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


def _get_firestore_client_or_raise() -> FirestoreRESTClient:
    """Return Firestore client or raise BackendUnavailableException (503)."""
    client = get_firestore_client()
    if client is None:
        raise BackendUnavailableException(
            "firestore client",
            reason="Firestore not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


def _get_memory_store(request: Request) -> InMemoryStore:
    store = getattr(request.app.state, "memory_store", None)
    if store is None:
        store = InMemoryStore()
        request.app.state.memory_store = store
    return store


def get_church_repo(request: Request, settings: SettingsDep) -> IChurchRepository:
    """Church repository (Firestore or in-memory from config)."""
    if settings.database_backend == "memory":
        return InMemoryChurchRepository(_get_memory_store(request))
    return FirestoreChurchRepository(_get_firestore_client_or_raise())


def get_audit_log_repo(request: Request, settings: SettingsDep) -> IAuditLogRepository:
    """Audit log repository (Firestore or in-memory from config)."""
    if settings.database_backend == "memory":
        return InMemoryAuditLogRepository(_get_memory_store(request))
    return FirestoreAuditLogRepository(_get_firestore_client_or_raise())


def get_user_profile_repo(
    request: Request, settings: SettingsDep
) -> IUserProfileRepository:
    """User profile repository (Firestore or in-memory from config)."""
    if settings.database_backend == "memory":
        return InMemoryUserProfileRepository(_get_memory_store(request))
    return FirestoreUserProfileRepository(_get_firestore_client_or_raise())


def get_authorization_service() -> AuthorizationService:
    """Role and scope checks (composition root)."""
    return AuthorizationService()


def get_audit_log_service(
    audit_repo: Annotated[IAuditLogRepository, Depends(get_audit_log_repo)],
    settings: SettingsDep,
) -> AuditLogService:
    """Audit log service with the configured query cap."""
    return AuditLogService(audit_repo, max_limit=settings.audit_query_max_limit)


def get_church_service(
    church_repo: Annotated[IChurchRepository, Depends(get_church_repo)],
    audit_service: Annotated[AuditLogService, Depends(get_audit_log_service)],
    authorizer: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> ChurchRecordService:
    """Church record service (composition root)."""
    return ChurchRecordService(church_repo, audit_service, authorizer)


def get_activity_log_service(
    audit_service: Annotated[AuditLogService, Depends(get_audit_log_service)],
    authorizer: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> ActivityLogService:
    """Role-scoped audit log reads (composition root)."""
    return ActivityLogService(audit_service, authorizer)


def get_token_verifier(settings: SettingsDep) -> ITokenVerifier:
    """Firebase ID token verifier; audience from config or the Firestore project."""
    project_id = settings.firebase_project_id
    if not project_id:
        client = get_firestore_client()
        project_id = client.project_id if client is not None else None
    if not project_id:
        raise BackendUnavailableException(
            "token verification", reason="FIREBASE_PROJECT_ID not configured"
        )
    return FirebaseTokenVerifier(project_id)


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    verifier: Annotated[ITokenVerifier, Depends(get_token_verifier)],
    profiles: Annotated[IUserProfileRepository, Depends(get_user_profile_repo)],
) -> ActorContext:
    """Return the authenticated actor; 401 without a valid token, 403 without an active profile."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Not authenticated")
    uid = await verifier.verify(credentials.credentials)
    actor = await profiles.get_actor(uid)
    if actor is None:
        raise AuthorizationException(message="No active reviewer profile for this account")
    return actor


def get_request_id_dep(request: Request) -> str | None:
    """Request id assigned by RequestIDMiddleware (recorded as audit session_id)."""
    return get_request_id(request)


CurrentActor = Annotated[ActorContext, Depends(get_current_actor)]
RequestId = Annotated[str | None, Depends(get_request_id_dep)]
