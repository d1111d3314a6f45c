"""Shared HTTP plumbing for the backend services."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from confmod.config import Settings


def build_client(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an async client bound to the configured API base URL."""
    settings = settings or Settings()
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout_seconds,
        headers=settings.auth_headers(),
        transport=transport,
    )


def unwrap_payload(payload: Any) -> Any:
    """Strip the optional `{"data": ...}` envelope some endpoints use."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def describe_http_error(exc: Exception) -> str:
    """Short human-readable description of a transport or status error."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "request timed out"
    return str(exc) or type(exc).__name__
