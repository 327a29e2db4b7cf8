"""Integration tests for database functionality.

Tests schema creation through both alembic migrations and ``init_db``,
session management, and NPC seed data against a file-backed SQLite database.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from sqlalchemy import text

from chatarena.config import Settings
from chatarena.database import (
    build_session_factory,
    check_database_health,
    count_rows,
    create_db_engine,
    get_table_names,
    init_db,
)
from chatarena.models import Combatant, seed_npc_combatants
from chatarena.models.seed_data import NPC_ROSTER

pytestmark = pytest.mark.integration

EXPECTED_TABLES = {"battle_restrictions", "battles", "combatants"}


@pytest.fixture(scope="module")
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


@pytest.fixture
def file_engine(tmp_path):
    settings = Settings(_env_file=None, DATABASE_URL=f"sqlite:///{tmp_path / 'arena.db'}")
    engine = create_db_engine(settings)
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def test_session(file_engine):
    """Create a session bound to the temporary database."""
    SessionLocal = build_session_factory(file_engine)  # noqa: N806
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


class TestDatabaseInitialization:
    """Tests for database initialization."""

    def test_init_db_creates_all_tables(self, file_engine):
        assert set(get_table_names(file_engine)) == EXPECTED_TABLES

    def test_init_db_is_idempotent(self, file_engine):
        init_db(file_engine)
        assert set(get_table_names(file_engine)) == EXPECTED_TABLES

    def test_database_health_check(self, file_engine):
        assert check_database_health(file_engine) is True

    def test_database_health_check_unreachable(self, tmp_path):
        missing = tmp_path / "missing" / "arena.db"
        engine = create_db_engine(Settings(_env_file=None, DATABASE_URL=f"sqlite:///{missing}"))
        try:
            assert check_database_health(engine) is False
        finally:
            engine.dispose()

    def test_sqlite_pragmas(self, file_engine):
        with file_engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_migrations_match_models(self, project_root, tmp_path):
        """Run alembic against a fresh file and compare the resulting tables."""
        db_path = tmp_path / "migrated.db"
        env = {**os.environ, "DATABASE_URL": f"sqlite:///{db_path}"}
        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            check=False,
            cwd=project_root,
            capture_output=True,
            text=True,
            env=env,
        )
        if result.returncode != 0:
            raise RuntimeError(f"Migration failed: {result.stderr}")

        engine = create_db_engine(Settings(_env_file=None, DATABASE_URL=f"sqlite:///{db_path}"))
        try:
            assert set(get_table_names(engine)) == EXPECTED_TABLES | {"alembic_version"}
        finally:
            engine.dispose()


class TestSeedData:
    """Tests for seed data population."""

    def test_npcs_seeded_once(self, test_session):
        assert seed_npc_combatants(test_session) == len(NPC_ROSTER)
        assert seed_npc_combatants(test_session) == 0
        assert count_rows(test_session, "combatants") == 20

    def test_npc_data_integrity(self, test_session):
        seed_npc_combatants(test_session)
        npcs = test_session.query(Combatant).filter_by(is_system_controlled=True).all()

        assert {npc.owner_account_id for npc in npcs} == {"NPC"}
        assert min(npc.rating for npc in npcs) == 500
        assert max(npc.rating for npc in npcs) == 1250
        assert all(npc.total_battles == 0 for npc in npcs)


class TestSessionManagement:
    """Tests for row counting helpers."""

    def test_count_rows_empty(self, test_session):
        assert count_rows(test_session, "battles") == 0

    def test_count_rows_rejects_unknown_table(self, test_session):
        with pytest.raises(ValueError, match="Invalid table name"):
            count_rows(test_session, "armies")
