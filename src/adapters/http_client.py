"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and auth for every Content Management API call.
- Tests swap the network out through `transport` (e.g. `httpx.MockTransport`).

Note: the client is built per command and closed with `async with`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings

CONTENTFUL_MEDIA_TYPE = "application/vnd.contentful.management.v1+json"


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` preconfigured for the Content Management API."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": CONTENTFUL_MEDIA_TYPE,
    }
    if settings.management_token:
        headers["Authorization"] = f"Bearer {settings.management_token}"
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
