"""Content Management API adapter (Contentful).

Covers only what applying a migration plan needs: content types, publishing
and editor interfaces, plus a space lookup for diagnostics. Every call is
scoped to one space and environment.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable

import httpx

from core.config import AppSettings
from core.domain.models import ContentTypeDefinition
from core.errors import CmsMigrateError, ContentfulAPIError, ContentfulConnectionError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def _safe_retry_after_seconds(response: httpx.Response) -> float | None:
    value = response.headers.get("X-Contentful-RateLimit-Reset") or response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def _error_from_response(response: httpx.Response) -> ContentfulAPIError:
    message = response.reason_phrase or "request failed"
    error_id = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("message"), str):
            message = body["message"]
        sys_info = body.get("sys")
        if isinstance(sys_info, dict) and isinstance(sys_info.get("id"), str):
            error_id = sys_info["id"]
    return ContentfulAPIError(
        response.status_code,
        message,
        error_id=error_id,
        request_id=response.headers.get("X-Contentful-Request-Id"),
    )


class ContentfulManagementClient:
    """Thin async client for one space/environment.

    The `httpx.AsyncClient` is owned by the caller (see
    `adapters.http_client.build_async_client`).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        space_id: str,
        environment_id: str = "master",
        max_retries: int = 3,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if not space_id:
            raise CmsMigrateError("A space id is required to talk to the Content Management API")
        self._http = http
        self._space_id = space_id
        self._environment_id = environment_id
        self._max_retries = max_retries
        self._sleep = sleep

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: AppSettings) -> "ContentfulManagementClient":
        return cls(
            http,
            space_id=settings.space_id or "",
            environment_id=settings.environment_id,
            max_retries=settings.max_retries,
        )

    @property
    def _env_path(self) -> str:
        return f"/spaces/{self._space_id}/environments/{self._environment_id}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        version: int | None = None,
        allow_404: bool = False,
    ) -> dict[str, Any] | None:
        headers: dict[str, str] = {}
        if version is not None:
            headers["X-Contentful-Version"] = str(version)

        attempt = 0
        while True:
            logger.debug("%s %s", method, path)
            try:
                response = await self._http.request(method, path, json=json, headers=headers)
            except httpx.HTTPError as exc:
                raise ContentfulConnectionError(f"{method} {path} failed: {type(exc).__name__}: {exc}") from exc

            if response.status_code == 429 and attempt < self._max_retries:
                retry_after = _safe_retry_after_seconds(response)
                base = retry_after if retry_after is not None else (1.25 * (2**attempt))
                delay = base + random.uniform(0.0, 0.35)
                logger.warning("rate limited on %s %s, retrying in %.2fs", method, path, delay)
                await self._sleep(delay)
                attempt += 1
                continue

            if allow_404 and response.status_code == 404:
                return None
            if response.is_error:
                raise _error_from_response(response)
            if not response.content:
                return {}
            return response.json()

    async def get_space(self) -> dict[str, Any]:
        return await self._request("GET", f"/spaces/{self._space_id}") or {}

    async def get_content_type(self, content_type_id: str) -> dict[str, Any] | None:
        """Return the content type, or `None` if it does not exist."""

        return await self._request(
            "GET",
            f"{self._env_path}/content_types/{content_type_id}",
            allow_404=True,
        )

    async def put_content_type(
        self,
        definition: ContentTypeDefinition,
        version: int | None = None,
    ) -> dict[str, Any]:
        """Create (no `version`) or update a content type."""

        return await self._request(
            "PUT",
            f"{self._env_path}/content_types/{definition.id}",
            json=definition.to_api_payload(),
            version=version,
        ) or {}

    async def publish_content_type(self, content_type_id: str, version: int) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"{self._env_path}/content_types/{content_type_id}/published",
            version=version,
        ) or {}

    async def get_editor_interface(self, content_type_id: str) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"{self._env_path}/content_types/{content_type_id}/editor_interface",
        ) or {}

    async def put_editor_interface(
        self,
        content_type_id: str,
        controls: list[dict[str, Any]],
        version: int,
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"{self._env_path}/content_types/{content_type_id}/editor_interface",
            json={"controls": controls},
            version=version,
        ) or {}
