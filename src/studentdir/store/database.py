"""Database connection manager for the Student Store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studentdir.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY_URL = "sqlite:///:memory:"
DEFAULT_POOL_SIZE = 5


def mask_url(url: str) -> str:
    """Render a database URL with its password hidden."""
    return make_url(url).render_as_string(hide_password=True)


class Database:
    """Database connection manager.

    Accepts any SQLAlchemy URL. SQLite databases get WAL mode and foreign
    keys enabled; other backends get a bounded connection pool.
    """

    def __init__(self, url: str = MEMORY_URL, pool_size: int = DEFAULT_POOL_SIZE) -> None:
        """Initialize database connection.

        Args:
            url: SQLAlchemy database URL. Use "sqlite:///:memory:" for in-memory DB.
            pool_size: Max pooled connections for non-SQLite backends.
        """
        self.url = url
        self.pool_size = pool_size
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and make_url(self.url).database in (None, "", ":memory:")

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.is_memory:
                # One shared connection so every session sees the same in-memory DB,
                # including from TestClient's worker thread
                self._engine = create_engine(
                    MEMORY_URL,
                    echo=False,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            elif self.is_sqlite:
                database = make_url(self.url).database
                if database:
                    Path(database).parent.mkdir(parents=True, exist_ok=True)
                self._engine = create_engine(
                    self.url,
                    echo=False,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    self.url,
                    echo=False,
                    pool_size=self.pool_size,
                    pool_pre_ping=True,
                )

            if self.is_sqlite:

                @event.listens_for(self._engine, "connect")
                def set_sqlite_pragma(
                    dbapi_connection: object, _connection_record: object
                ) -> None:
                    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()

        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session.

        Returns:
            A new SQLAlchemy session.
        """
        return self.session_factory()

    def is_wal_mode(self) -> bool:
        """Check if WAL mode is enabled (SQLite only)."""
        if not self.is_sqlite:
            return False
        with self.engine.connect() as conn:
            result = conn.execute(text("PRAGMA journal_mode"))
            return result.scalar() == "wal"

    def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
