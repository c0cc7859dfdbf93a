"""Identity provider interface + selection helpers.

Authentication for the portal is delegated to an external identity
provider. Routes depend on the narrow `IdentityProvider` interface only;
the demo provider backs local development and tests.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Protocol

from portal.core.config import settings
from portal.db.enums import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str
    display_name: str
    role: UserRole = UserRole.CLIENT


AuthStateListener = Callable[[str, "Identity | None"], None]


class IdentityError(Exception):
    """Raised when the provider rejects a sign-in."""


class IdentityProvider(Protocol):
    key: str

    def sign_in(self, email: str, password: str) -> Identity:
        """Verify credentials and return the signed-in identity."""

    def sign_out(self, uid: str) -> None:
        """End the provider-side session for uid."""

    def on_auth_state_change(self, callback: AuthStateListener) -> Callable[[], None]:
        """Register a listener called with (uid, identity or None); returns unsubscribe."""


@dataclass(frozen=True)
class DemoAccount:
    email: str
    password: str
    uid: str
    role: UserRole


DEMO_ACCOUNTS = (
    DemoAccount("admin@stampede.ai", "admin123", "admin-001", UserRole.ADMIN),
    DemoAccount("client@example.com", "client123", "client-001", UserRole.CLIENT),
)


class DemoIdentityProvider:
    """
    In-memory provider with a fixed account list.

    Never signs anyone in on its own; callers must call sign_in explicitly.
    """

    key = "demo"

    def __init__(self, accounts: tuple[DemoAccount, ...] = DEMO_ACCOUNTS):
        self._accounts = {a.email.lower(): a for a in accounts}
        self._signed_in: dict[str, Identity] = {}
        self._listeners: list[AuthStateListener] = []
        self._lock = threading.Lock()

    def sign_in(self, email: str, password: str) -> Identity:
        account = self._accounts.get(email.strip().lower())
        if not account or account.password != password:
            raise IdentityError("Invalid email or password")

        identity = Identity(
            uid=account.uid,
            email=account.email,
            display_name=account.email.split("@")[0],
            role=account.role,
        )
        with self._lock:
            self._signed_in[identity.uid] = identity
        self._notify(identity.uid, identity)
        return identity

    def sign_out(self, uid: str) -> None:
        with self._lock:
            was_signed_in = self._signed_in.pop(uid, None) is not None
        if was_signed_in:
            self._notify(uid, None)

    def on_auth_state_change(self, callback: AuthStateListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def current_identity(self, uid: str) -> Identity | None:
        return self._signed_in.get(uid)

    def _notify(self, uid: str, identity: Identity | None) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(uid, identity)
            except Exception:
                logger.exception("Auth state listener failed")


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """Return the configured provider (FastAPI dependency)."""
    if settings.IDENTITY_PROVIDER == "demo":
        return DemoIdentityProvider()
    raise ValueError(f"Unknown IDENTITY_PROVIDER: {settings.IDENTITY_PROVIDER}")
