"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI.
- Adapters (HTTP/CMA) read their settings from the same contract.

Note:
- The user `.env` lives outside the project so an installed `cms-migrate`
  can be configured with `doctor setup` instead of editing files by hand.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "cms-migrate"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "cms-migrate"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "cms-migrate"
    return Path.home() / ".config" / "cms-migrate"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write or update variables in the user's global .env.

    Keys already present and not mentioned in `values` are kept; `None` values
    are skipped so a blank prompt never erases a stored secret.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# cms-migrate user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Application settings.

    Every field can be set through `CMS_MIGRATE_<FIELD>` in the environment,
    the project `.env`, or the user `.env` written by `doctor setup`.
    """

    model_config = SettingsConfigDict(
        env_prefix="CMS_MIGRATE_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    space_id: str | None = Field(
        default=None,
        description="Contentful space that migrations are applied to.",
    )
    environment_id: str = Field(
        default="master",
        min_length=1,
        description="Environment (or alias) inside the space.",
    )
    management_token: str | None = Field(
        default=None,
        description="Content Management API personal access token.",
    )
    api_base_url: str = Field(
        default="https://api.contentful.com",
        min_length=8,
        description="Content Management API base URL.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="cms-migrate/0.1",
        min_length=1,
        description="User-Agent sent to the Content Management API.",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries on rate limiting (HTTP 429).",
    )

    migrations_dir: Path = Field(
        default=Path("migrations"),
        description="Directory scanned for migration scripts.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the `logging` handlers (DEBUG, INFO, ...).",
    )

    def has_credentials(self) -> bool:
        return bool(self.space_id) and bool(self.management_token)
