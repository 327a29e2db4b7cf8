"""Database connection and session management.

This module provides database connection management, session factories,
and utility functions for database operations.
"""

from typing import Any

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from chatarena.config import Settings, get_settings
from chatarena.models import Base


def _configure_sqlite_wal(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Configure SQLite to use WAL mode for better concurrency.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)

    Note:
        WAL mode lets readers and a writer operate simultaneously, which
        matters once battles for different accounts run on parallel threads.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Create and configure the database engine.

    Args:
        settings: Settings to read the URL and pool options from; defaults to
            the cached application settings

    Returns:
        Engine: Configured SQLAlchemy engine

    Note:
        For SQLite databases, automatically configures WAL mode and foreign keys.
    """
    settings = settings or get_settings()

    if settings.DATABASE_URL.startswith("sqlite"):
        # SQLite engine: simpler pooling, enable SQLite pragmas on connect
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _configure_sqlite_wal)
    else:
        # Non-SQLite (e.g., PostgreSQL): honor pool settings for production use
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        )

    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory with the project's session options."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Initialize the database by creating all tables.

    Note:
        This creates tables directly without migrations. For production,
        use alembic migrations instead.
    """
    Base.metadata.create_all(bind=engine)


def check_database_health(engine: Engine) -> bool:
    """Check if the database is accessible.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


def get_table_names(engine: Engine) -> list[str]:
    """Get list of all table names in the database.

    Returns:
        list[str]: List of table names
    """
    inspector = inspect(engine)
    return inspector.get_table_names()


def count_rows(session: Session, table_name: str) -> int:
    """Count rows in a specific table.

    Args:
        session: Database session
        table_name: Name of the table to count.
                   Must be a valid table in the schema.

    Returns:
        int: Number of rows in the table

    Raises:
        ValueError: If table_name is not a valid table in the schema

    Example:
        ```python
        with Session(engine) as session:
            battle_count = count_rows(session, "battles")
        ```
    """
    if table_name not in Base.metadata.tables:
        valid_tables = sorted(Base.metadata.tables.keys())
        raise ValueError(
            f"Invalid table name: {table_name}. Valid tables: {', '.join(valid_tables)}"
        )

    table = Base.metadata.tables[table_name]
    result = session.execute(select(func.count()).select_from(table)).scalar()
    return result or 0
