"""Shared fixtures.

No network access: every HTTP exchange goes through `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

import core.config
from core.config import AppSettings

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real `CMS_MIGRATE_*` variables and `.env` files out of the tests.

    The user config dir is redirected to `tmp_path`, so `doctor setup` writes
    there and `AppSettings` never reads the developer's own `.env`.
    """

    for key in list(os.environ):
        if key.upper().startswith("CMS_MIGRATE_"):
            monkeypatch.delenv(key, raising=False)

    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(core.config, "get_user_config_dir", lambda: user_dir)
    monkeypatch.setitem(AppSettings.model_config, "env_file", (".env", str(user_dir / ".env")))

    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)


@pytest.fixture
def user_env_file(tmp_path) -> Path:
    return tmp_path / "user-config" / ".env"


@pytest.fixture
def migrations_dir() -> Path:
    return PROJECT_ROOT / "migrations"


@pytest.fixture
def initial_migration_path(migrations_dir: Path) -> Path:
    return migrations_dir / "00_initial_migration.py"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        space_id="space1",
        environment_id="master",
        management_token="secret-token",
        _env_file=None,
    )


def json_response(status_code: int, payload: Any, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/vnd.contentful.management.v1+json", **(headers or {})},
    )


class FakeContentful:
    """Minimal in-memory Content Management API for one environment."""

    def __init__(self, space_id: str = "space1", environment_id: str = "master") -> None:
        self.prefix = f"/spaces/{space_id}/environments/{environment_id}"
        self.space_id = space_id
        self.content_types: dict[str, dict[str, Any]] = {}
        self.editor_interfaces: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == f"/spaces/{self.space_id}" and request.method == "GET":
            return json_response(200, {"name": "Test space", "sys": {"id": self.space_id}})

        if not path.startswith(self.prefix + "/content_types/"):
            return json_response(404, {"sys": {"type": "Error", "id": "NotFound"}, "message": "Not found"})

        parts = path[len(self.prefix) + len("/content_types/"):].split("/")
        ct_id = parts[0]
        sub = parts[1] if len(parts) > 1 else None

        if sub is None and request.method == "GET":
            if ct_id not in self.content_types:
                return json_response(404, {"sys": {"type": "Error", "id": "NotFound"}, "message": "Not found"})
            return json_response(200, self.content_types[ct_id])

        if sub is None and request.method == "PUT":
            body = json.loads(request.content)
            self.content_types[ct_id] = {**body, "sys": {"id": ct_id, "version": 1}}
            return json_response(201, self.content_types[ct_id])

        if sub == "published" and request.method == "PUT":
            ct = self.content_types[ct_id]
            ct["sys"]["version"] += 1
            self.editor_interfaces[ct_id] = {
                "sys": {"version": 1},
                "controls": [
                    {"fieldId": f["id"], "widgetNamespace": "builtin", "widgetId": "singleLine"}
                    for f in ct["fields"]
                ],
            }
            return json_response(200, ct)

        if sub == "editor_interface" and request.method == "GET":
            return json_response(200, self.editor_interfaces[ct_id])

        if sub == "editor_interface" and request.method == "PUT":
            body = json.loads(request.content)
            ei = self.editor_interfaces[ct_id]
            ei["controls"] = body["controls"]
            ei["sys"]["version"] += 1
            return json_response(200, ei)

        return json_response(400, {"sys": {"type": "Error", "id": "BadRequest"}, "message": "Unexpected call"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_contentful() -> FakeContentful:
    return FakeContentful()


@pytest.fixture
def sleep_recorder() -> tuple[list[float], Callable[[float], Any]]:
    calls: list[float] = []

    async def _sleep(seconds: float) -> None:
        calls.append(seconds)

    return calls, _sleep
