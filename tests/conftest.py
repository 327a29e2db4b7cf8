"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`chatarena` package (e.g., `from chatarena.api.app import create_app`)
without requiring an editable install in CI. It also provides the in-memory
database fixtures shared by the model, repository and service tests.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from chatarena.models import Base  # noqa: E402


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing and dispose it after use."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine):
    """Create a new database session for a test."""
    Session = sessionmaker(bind=engine, expire_on_commit=False)  # noqa: N806
    session = Session()
    yield session
    session.close()
