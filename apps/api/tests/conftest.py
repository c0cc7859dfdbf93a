"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database with savepoint isolation (rollback after each test)
- Portal users with session cookies and CMS admins with bearer tokens
- HTTPX AsyncClient with proper headers
"""
import os
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Must be set before any portal import reads settings
os.environ["TESTING"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["INTERNAL_SECRET"] = "test-internal-secret"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.main import app
from portal.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from portal.core.security import create_session_token, hash_password
from portal.db.base import Base
from portal.db.enums import CmsRole, UserRole
from portal.db.models import CmsAdmin, ContentType, User
from portal.services import cms_admin_service


# =============================================================================
# Database Fixtures (Savepoint pattern)
# =============================================================================

test_engine = create_engine(
    "sqlite://",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)


# pysqlite's own transaction handling breaks SAVEPOINT; take it over
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


Base.metadata.create_all(test_engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Creates a database session with savepoint for test isolation.

    App code may call commit() and rollback(); both only touch the
    savepoint, and the outer transaction is rolled back at the end.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def session_factory(db: Session):
    """sessionmaker on the test connection, for code that opens its own sessions."""
    return sessionmaker(bind=db.connection(), join_transaction_mode="create_savepoint")


# =============================================================================
# Portal users
# =============================================================================

def make_user(db: Session, email: str, role: UserRole = UserRole.CLIENT) -> User:
    user = User(
        email=email,
        external_auth_id=f"uid-{email}",
        name=email.split("@")[0],
        role=role.value,
    )
    db.add(user)
    db.commit()
    return user


def session_cookie(user: User) -> dict[str, str]:
    return {COOKIE_NAME: create_session_token(user.id, user.email, user.role)}


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    return make_user(db, "venue-owner@example.com")


@pytest.fixture(scope="function")
def admin_user(db: Session) -> User:
    return make_user(db, "ops@example.com", role=UserRole.ADMIN)


# =============================================================================
# CMS admins
# =============================================================================

@dataclass
class CmsAuth:
    """CMS admin plus a bearer token for it."""
    admin: CmsAdmin
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def make_cms_admin(db: Session, email: str, role: CmsRole, password: str = "password123") -> CmsAuth:
    admin = CmsAdmin(
        email=email,
        password_hash=hash_password(password),
        name=email.split("@")[0].title(),
        role=role.value,
    )
    db.add(admin)
    db.commit()
    return CmsAuth(admin=admin, token=cms_admin_service.issue_token(admin))


@pytest.fixture(scope="function")
def super_admin(db: Session) -> CmsAuth:
    return make_cms_admin(db, "root@cms.test", CmsRole.SUPER_ADMIN)


@pytest.fixture(scope="function")
def cms_admin(db: Session) -> CmsAuth:
    return make_cms_admin(db, "admin@cms.test", CmsRole.ADMIN)


@pytest.fixture(scope="function")
def editor(db: Session) -> CmsAuth:
    return make_cms_admin(db, "editor@cms.test", CmsRole.EDITOR)


@pytest.fixture(scope="function")
def other_editor(db: Session) -> CmsAuth:
    return make_cms_admin(db, "editor2@cms.test", CmsRole.EDITOR)


HERO_SCHEMA = {
    "type": "object",
    "properties": {
        "headline": {"type": "string", "title": "Headline"},
        "subheading": {"type": "string", "title": "Subheading"},
        "show_cta": {"type": "boolean", "title": "Show CTA"},
    },
    "required": ["headline"],
}


@pytest.fixture(scope="function")
def hero_type(db: Session) -> ContentType:
    content_type = ContentType(
        name="hero_section",
        display_name="Hero Section",
        schema=HERO_SCHEMA,
    )
    db.add(content_type)
    db.commit()
    return content_type


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public and CMS endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(db: Session, test_user: User) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated AsyncClient with session cookie and CSRF header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=session_cookie(test_user),
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def admin_client(db: Session, admin_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated AsyncClient for a portal admin."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=session_cookie(admin_user),
        headers={CSRF_HEADER: CSRF_HEADER_VALUE},
    ) as c:
        yield c

    app.dependency_overrides.clear()
