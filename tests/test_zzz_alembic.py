"""Alembic revision history tests.

The migrations are PostgreSQL-specific, so these only inspect the script
directory rather than running an upgrade.
"""

from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory

ROOT = Path(__file__).resolve().parent.parent


def _scripts() -> ScriptDirectory:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    return ScriptDirectory.from_config(config)


def test_single_head() -> None:
    assert _scripts().get_heads() == ["001_initial_schema"]


def test_initial_revision_creates_core_tables() -> None:
    source = (ROOT / "alembic" / "versions" / "001_initial_schema.py").read_text()
    for table in ("users", "follows", "activity_feed"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in source
    assert "follows_pair_key" in source
