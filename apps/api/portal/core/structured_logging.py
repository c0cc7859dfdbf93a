"""Structured logging helpers (PII-safe)."""

from typing import Any


def build_log_context(
    *,
    user_id: int | str | None = None,
    admin_id: int | str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict for ``logger.*(..., extra=...)``."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = str(user_id)
    if admin_id:
        context["admin_id"] = str(admin_id)
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
