import pytest

from core.errors import MigrationLoadError
from core.services.migration_loader import discover_migrations, load_migration


def _write(path, body):
    path.write_text(body, encoding="utf-8")
    return path


def test_discovers_scripts_in_name_order(tmp_path):
    _write(tmp_path / "10_second.py", "def migrate(migration):\n    pass\n")
    _write(tmp_path / "02_first.py", "def migrate(migration):\n    pass\n")
    _write(tmp_path / "_helpers.py", "")
    _write(tmp_path / "notes.txt", "")

    assert [p.name for p in discover_migrations(tmp_path)] == ["02_first.py", "10_second.py"]


def test_bundled_migrations_directory(migrations_dir):
    assert [p.name for p in discover_migrations(migrations_dir)] == ["00_initial_migration.py"]


def test_missing_directory(tmp_path):
    with pytest.raises(MigrationLoadError, match="not found"):
        discover_migrations(tmp_path / "nope")


def test_missing_script(tmp_path):
    with pytest.raises(MigrationLoadError, match="not found"):
        load_migration(tmp_path / "00_missing.py")


def test_script_without_migrate(tmp_path):
    path = _write(tmp_path / "00_empty.py", "VALUE = 1\n")
    with pytest.raises(MigrationLoadError, match="does not define"):
        load_migration(path)


def test_migrate_must_be_callable(tmp_path):
    path = _write(tmp_path / "00_bad.py", "migrate = 42\n")
    with pytest.raises(MigrationLoadError, match="not callable"):
        load_migration(path)


def test_import_error_is_wrapped(tmp_path):
    path = _write(tmp_path / "00_broken.py", "raise RuntimeError('boom')\n")
    with pytest.raises(MigrationLoadError, match="RuntimeError: boom"):
        load_migration(path)


def test_returns_migrate_function(tmp_path):
    path = _write(tmp_path / "00_ok.py", "def migrate(migration):\n    migration.append('ran')\n")
    calls = []
    load_migration(path)(calls)
    assert calls == ["ran"]
