"""Discovery and import of migration scripts.

Why it lives in `core/services/`:
- Both the CLI and the tests load scripts the same way.

Note:
- Scripts are plain Python files named so that sorting by file name gives the
  order they should run in (`00_initial_migration.py`, `01_...`).
- They are not part of any package, so they are imported by path.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
from pathlib import Path

from core.errors import MigrationLoadError
from core.interfaces.migration_context import MigrationFunction

logger = logging.getLogger(__name__)

ENTRYPOINT = "migrate"


def discover_migrations(directory: Path) -> list[Path]:
    """Return the `*.py` scripts in `directory`, sorted by file name.

    Files starting with `_` (e.g. `__init__.py`, shared helpers) are skipped.
    """

    if not directory.is_dir():
        raise MigrationLoadError(f"Migrations directory not found: {directory}")

    paths = sorted(
        (p for p in directory.glob("*.py") if p.is_file() and not p.name.startswith("_")),
        key=lambda p: p.name,
    )
    logger.info("found %d migration(s) in %s", len(paths), directory)
    return paths


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:10]  # nosec
    return f"cms_migrate_script_{digest}"


def load_migration(path: Path) -> MigrationFunction:
    """Import the script at `path` and return its `migrate` callable."""

    if not path.is_file():
        raise MigrationLoadError(f"Migration script not found: {path}")

    spec = importlib.util.spec_from_file_location(_module_name(path), path)
    if spec is None or spec.loader is None:
        raise MigrationLoadError(f"Cannot import migration script: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise MigrationLoadError(f"Error while importing {path}: {type(exc).__name__}: {exc}") from exc

    func = getattr(module, ENTRYPOINT, None)
    if func is None:
        raise MigrationLoadError(f"{path} does not define `{ENTRYPOINT}(migration)`")
    if not callable(func):
        raise MigrationLoadError(f"{path}: `{ENTRYPOINT}` is not callable")

    logger.debug("loaded %s from %s", ENTRYPOINT, path)
    return func
