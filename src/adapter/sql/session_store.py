"""SQLAlchemy implementation of SessionStore, backed by the ``session`` table."""

from datetime import datetime
from logging import getLogger

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from adapter.sql.connection import Database
from adapter.sql.tables import SessionRecord, as_utc
from domain.model.errors import SessionDestroyError, StorageError
from domain.model.session import Session

logger = getLogger(__name__)


class SqlSessionStore:
    def __init__(self, db: Database):
        self.db = db

    def save(self, session: Session) -> None:
        try:
            with self.db.session() as s:
                s.merge(SessionRecord(sid=session.token, sess=session.payload(), expire=session.expires_at))
        except SQLAlchemyError as e:
            logger.error("Failed to save session", extra={"userId": session.user_id, "error": str(e)})
            raise StorageError() from e

    def get(self, token: str) -> Session | None:
        try:
            with self.db.session() as s:
                row = s.get(SessionRecord, token)
                if row is None:
                    return None
                user_id = (row.sess or {}).get('userId')
                if not user_id:
                    logger.warning("Session row without userId ignored")
                    return None
                return Session(token=row.sid, user_id=user_id, expires_at=as_utc(row.expire))
        except SQLAlchemyError as e:
            logger.error("Failed to read session", extra={"error": str(e)})
            raise StorageError() from e

    def delete(self, token: str) -> bool:
        try:
            with self.db.session() as s:
                result = s.execute(delete(SessionRecord).where(SessionRecord.sid == token))
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Failed to delete session", extra={"error": str(e)})
            raise SessionDestroyError() from e

    def purge_expired(self, now: datetime) -> int:
        try:
            with self.db.session() as s:
                result = s.execute(delete(SessionRecord).where(SessionRecord.expire <= now))
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error("Failed to purge expired sessions", extra={"error": str(e)})
            raise StorageError() from e
