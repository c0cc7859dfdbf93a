"""Tests for the identity provider port and portal sign-in."""
import pytest
from httpx import AsyncClient

from portal.core.deps import COOKIE_NAME
from portal.core.identity import DemoIdentityProvider, IdentityError, get_identity_provider
from portal.db.enums import UserRole
from portal.main import app
from portal.services import user_service


def test_demo_sign_in_and_out_notifies_listeners():
    provider = DemoIdentityProvider()
    events = []
    unsubscribe = provider.on_auth_state_change(
        lambda uid, identity: events.append((uid, identity.email if identity else None))
    )

    identity = provider.sign_in("Client@Example.com", "client123")
    provider.sign_out(identity.uid)
    provider.sign_out(identity.uid)
    unsubscribe()
    provider.sign_in("admin@stampede.ai", "admin123")

    assert identity.role == UserRole.CLIENT
    assert events == [("client-001", "client@example.com"), ("client-001", None)]


def test_demo_rejects_bad_password():
    provider = DemoIdentityProvider()
    with pytest.raises(IdentityError):
        provider.sign_in("admin@stampede.ai", "wrong")
    assert provider.current_identity("admin-001") is None


def test_demo_never_signs_in_on_its_own():
    provider = DemoIdentityProvider()
    events = []
    provider.on_auth_state_change(lambda uid, identity: events.append(uid))
    assert events == []
    assert provider.current_identity("client-001") is None


def test_listener_errors_are_contained():
    provider = DemoIdentityProvider()
    seen = []

    def broken(uid, identity):
        raise RuntimeError("listener bug")

    provider.on_auth_state_change(broken)
    provider.on_auth_state_change(lambda uid, identity: seen.append(uid))

    provider.sign_in("client@example.com", "client123")
    assert seen == ["client-001"]


@pytest.fixture
def demo_provider():
    provider = DemoIdentityProvider()
    app.dependency_overrides[get_identity_provider] = lambda: provider
    yield provider


@pytest.mark.asyncio
async def test_login_creates_user_and_sets_cookie(client: AsyncClient, db, demo_provider):
    response = await client.post(
        "/api/auth/login", json={"email": "client@example.com", "password": "client123"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["created"] is True
    assert data["user"]["external_auth_id"] == "client-001"
    assert COOKIE_NAME in response.cookies
    assert user_service.get_user_by_external_id(db, "client-001") is not None

    me = await client.get("/api/auth/me", cookies={COOKIE_NAME: response.cookies[COOKIE_NAME]})
    assert me.json()["email"] == "client@example.com"

    again = await client.post(
        "/api/auth/login", json={"email": "client@example.com", "password": "client123"}
    )
    assert again.json()["created"] is False


@pytest.mark.asyncio
async def test_login_bad_credentials(client: AsyncClient, demo_provider):
    response = await client.post(
        "/api/auth/login", json={"email": "client@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_disabled_user_cannot_sign_in(client: AsyncClient, db, demo_provider):
    await client.post("/api/auth/login", json={"email": "client@example.com", "password": "client123"})
    user = user_service.get_user_by_external_id(db, "client-001")
    user.is_active = False
    db.commit()

    response = await client.post(
        "/api/auth/login", json={"email": "client@example.com", "password": "client123"}
    )
    assert response.status_code == 401
    assert demo_provider.current_identity("client-001") is None


@pytest.mark.asyncio
async def test_logout_clears_cookie(authed_client: AsyncClient, demo_provider):
    response = await authed_client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"status": "logged_out"}


@pytest.mark.asyncio
async def test_invalid_cookie_rejected(client: AsyncClient):
    response = await client.get("/api/auth/me", cookies={COOKIE_NAME: "not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid session"


@pytest.mark.asyncio
async def test_public_config(client: AsyncClient):
    response = await client.get("/api/config")
    assert response.status_code == 200
    assert set(response.json()) == {"tawk_property_id", "version"}
