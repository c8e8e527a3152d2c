"""Pytest configuration and fixtures for visita.

Tests run against the in-memory backend; the environment is set before
visita is imported so that settings pick it up.
"""

import os

os.environ["DATABASE_BACKEND"] = "memory"
os.environ.setdefault("FIREBASE_PROJECT_ID", "visita-test")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from visita.api.v1.dependencies import get_current_actor
from visita.application.dtos.actor import ActorContext
from visita.application.dtos.church import ChurchCreate, ChurchResult
from visita.application.services.audit_log_service import AuditLogService
from visita.application.use_cases.churches import ChurchRecordService
from visita.core.config import get_settings
from visita.domain.enums import Diocese, HeritageClassification, UserRole
from visita.infrastructure.memory import (
    InMemoryAuditLogRepository,
    InMemoryChurchRepository,
    InMemoryStore,
)

get_settings.cache_clear()


@pytest.fixture
def chancery() -> ActorContext:
    """Chancery office reviewer for Tagbilaran."""
    return ActorContext(
        uid="chancery-tag",
        name="Tagbilaran Chancery",
        email="chancery@tagbilaran.example",
        role=UserRole.CHANCERY_OFFICE,
        diocese=Diocese.TAGBILARAN,
    )


@pytest.fixture
def chancery_talibon() -> ActorContext:
    """Chancery office reviewer for Talibon."""
    return ActorContext(
        uid="chancery-tal",
        name="Talibon Chancery",
        email="chancery@talibon.example",
        role=UserRole.CHANCERY_OFFICE,
        diocese=Diocese.TALIBON,
    )


@pytest.fixture
def museum() -> ActorContext:
    """Museum researcher (global role)."""
    return ActorContext(
        uid="museum-1",
        name="Museum Researcher",
        email="research@museum.example",
        role=UserRole.MUSEUM_RESEARCHER,
    )


@pytest.fixture
def secretary() -> ActorContext:
    """Parish secretary of the Loboc parish in Tagbilaran."""
    return ActorContext(
        uid="secretary-loboc",
        name="Loboc Secretary",
        email="secretary@loboc.example",
        role=UserRole.PARISH_SECRETARY,
        diocese=Diocese.TAGBILARAN,
        parish_id="parish-loboc",
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def church_repo(store: InMemoryStore) -> InMemoryChurchRepository:
    return InMemoryChurchRepository(store)


@pytest.fixture
def audit_repo(store: InMemoryStore) -> InMemoryAuditLogRepository:
    return InMemoryAuditLogRepository(store)


@pytest.fixture
def audit_service(audit_repo: InMemoryAuditLogRepository) -> AuditLogService:
    return AuditLogService(audit_repo, max_limit=500)


@pytest.fixture
def church_service(
    church_repo: InMemoryChurchRepository, audit_service: AuditLogService
) -> ChurchRecordService:
    return ChurchRecordService(church_repo, audit_service)


@pytest.fixture
def seed_church(church_repo: InMemoryChurchRepository):
    """Insert a pending church directly through the repository (no audit entry)."""

    async def _seed(
        name: str = "Loboc Church",
        classification: HeritageClassification = HeritageClassification.NON_HERITAGE,
        diocese: Diocese = Diocese.TAGBILARAN,
        parish_id: str | None = "parish-loboc",
        municipality: str = "Loboc",
    ) -> ChurchResult:
        return await church_repo.create(
            ChurchCreate(
                name=name,
                diocese=diocese,
                municipality=municipality,
                classification=classification,
                parish_id=parish_id,
            ),
            created_by="seed",
        )

    return _seed


@pytest.fixture
def app(store: InMemoryStore) -> FastAPI:
    """Fresh app per test sharing the ``store`` fixture as its in-memory backend."""
    from visita.main import create_app

    application = create_app()
    application.state.memory_store = store
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def act_as(app: FastAPI):
    """Make subsequent requests run as ``actor`` (bypasses token verification)."""

    def _act_as(actor: ActorContext) -> None:
        app.dependency_overrides[get_current_actor] = lambda: actor

    yield _act_as
    app.dependency_overrides.clear()
