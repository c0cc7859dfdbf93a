"""Async client helpers for the portal frontend and integrations."""

# Must match portal.core.deps.require_csrf_header
CSRF_HEADERS = {"X-Requested-With": "XMLHttpRequest"}
