"""SQLAlchemy implementation of UserRepository."""

import uuid
from logging import getLogger

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from adapter.sql.connection import Database
from adapter.sql.tables import UserRecord, as_utc
from domain.model.errors import DuplicateEmailError, StorageError
from domain.model.user import User

logger = getLogger(__name__)


class SqlUserRepository:
    def __init__(self, db: Database):
        self.db = db

    def _to_domain(self, row: UserRecord) -> User:
        """Convert a users row to the User domain model."""
        return User(
            id=row.id,
            name=row.name,
            email=row.email,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
            password_hash=row.password_hash,
        )

    def create(self, email: str, password_hash: str, name: str) -> User:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        try:
            with self.db.session() as session:
                row = UserRecord(id=user_id, email=email, password_hash=password_hash, name=name)
                session.add(row)
                session.flush()
                user = self._to_domain(row)
        except IntegrityError:
            # Unique index on email lost a race with a concurrent signup
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateEmailError() from None
        except SQLAlchemyError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StorageError() from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return user

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            with self.db.session() as session:
                row = session.scalars(select(UserRecord).where(UserRecord.email == email)).first()
                return self._to_domain(row) if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageError() from e

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            with self.db.session() as session:
                row = session.get(UserRecord, user_id)
                return self._to_domain(row) if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageError() from e
