"""Bearer token handling in get_current_actor."""

from fastapi import FastAPI
from httpx import AsyncClient

from visita.api.v1.dependencies import get_token_verifier
from visita.application.dtos.actor import ActorContext
from visita.domain.exceptions import AuthenticationException
from visita.infrastructure.memory import InMemoryStore


class _FakeVerifier:
    async def verify(self, token: str) -> str:
        if not token.startswith("valid-"):
            raise AuthenticationException("Invalid or expired token")
        return token.removeprefix("valid-")


async def test_missing_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/audit-log")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_valid_token_resolves_profile(
    app: FastAPI,
    client: AsyncClient,
    store: InMemoryStore,
    chancery: ActorContext,
) -> None:
    app.dependency_overrides[get_token_verifier] = lambda: _FakeVerifier()
    store.users[chancery.uid] = chancery

    response = await client.get(
        "/api/v1/audit-log", headers={"Authorization": f"Bearer valid-{chancery.uid}"}
    )

    assert response.status_code == 200
    app.dependency_overrides.clear()


async def test_invalid_token_is_401(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_token_verifier] = lambda: _FakeVerifier()
    response = await client.get(
        "/api/v1/audit-log", headers={"Authorization": "Bearer forged"}
    )
    assert response.status_code == 401
    app.dependency_overrides.clear()


async def test_token_without_profile_is_403(app: FastAPI, client: AsyncClient) -> None:
    app.dependency_overrides[get_token_verifier] = lambda: _FakeVerifier()
    response = await client.get(
        "/api/v1/audit-log", headers={"Authorization": "Bearer valid-stranger"}
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"
    app.dependency_overrides.clear()
