# shelf/sa/database.py
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from shelf.config import settings
from shelf.sa.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine and session factory for the shelf tables.

    Args:
        url: SQLAlchemy database URL; defaults to the configured one
        engine_kwargs: Extra options for create_engine
    """

    def __init__(self, url: Optional[str] = None, **engine_kwargs):
        self.url = url or settings.database_url
        self.is_sqlite = self.url.startswith("sqlite")
        self.engine: Engine = create_engine(self.url, **self._engine_options(engine_kwargs))
        if self.is_sqlite:
            # SQLite ignores REFERENCES clauses unless asked per connection
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._sessions = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def _engine_options(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        if self.is_sqlite:
            options = {"connect_args": {"check_same_thread": False}, "poolclass": NullPool}
        else:
            options = {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}
        options.update(overrides)
        return options

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """One unit of work: commit on success, roll back on error"""
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        return self._sessions()

    def init_db(self) -> None:
        """Create any missing tables"""
        Base.metadata.create_all(self.engine)


@lru_cache(maxsize=None)
def database_for(url: str) -> Database:
    """Shared Database per URL, so requests reuse one engine"""
    return Database(url)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a session on the configured database.

    The session is closed when the request is complete.
    """
    session = database_for(settings.database_url).get_session()
    try:
        yield session
    finally:
        session.close()
