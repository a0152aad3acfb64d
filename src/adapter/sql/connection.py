import os
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from adapter.sql.tables import Base

logger = logging.getLogger(__name__)

# Engine-level SQL echo is far too chatty for structured logs
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///./taskdesk.db')


def _is_sqlite(url: str) -> bool:
    return url.startswith('sqlite')


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class Database:
    """Explicit handle on the relational store.

    Built once at process start (see the API lifespan), passed to every
    repository, and disposed on shutdown. Nothing here is module-global.
    """

    def __init__(self, url: str = DATABASE_URL, echo: bool = False):
        self.url = url
        engine_kwargs: dict = {'echo': echo, 'pool_pre_ping': True}

        if _is_sqlite(url):
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if url in ('sqlite://', 'sqlite:///:memory:'):
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs['poolclass'] = StaticPool

        self.engine: Engine = create_engine(url, **engine_kwargs)
        if _is_sqlite(url):
            event.listen(self.engine, 'connect', _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Unit of work: commit on success, roll back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create missing tables and indexes."""
        Base.metadata.create_all(self.engine)
        logger.info("Database schema verified/created", extra={"dialect": self.engine.dialect.name})

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text('SELECT 1'))
            return True
        except SQLAlchemyError as e:
            logger.error("Database ping failed", extra={"error": str(e)[:200]})
            return False

    def dispose(self) -> None:
        self.engine.dispose()
