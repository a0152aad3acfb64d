"""SQLAlchemy table definitions for users, tasks and sessions."""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from domain.model.task import TITLE_MAX_LENGTH, TaskStatus

USERS_TABLE_NAME = 'users'
TASKS_TABLE_NAME = 'tasks'
SESSION_TABLE_NAME = 'session'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = USERS_TABLE_NAME

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    tasks: Mapped[list['TaskRecord']] = relationship(
        back_populates='owner', cascade='all, delete-orphan', passive_deletes=True
    )


class TaskRecord(Base):
    __tablename__ = TASKS_TABLE_NAME

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(
            TaskStatus,
            name='task_status',
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=TaskStatus.PENDING,
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey(f'{USERS_TABLE_NAME}.id', ondelete='CASCADE'), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    owner: Mapped[UserRecord] = relationship(back_populates='tasks')


class SessionRecord(Base):
    __tablename__ = SESSION_TABLE_NAME
    __table_args__ = (Index('IDX_session_expire', 'expire'),)

    sid: Mapped[str] = mapped_column(String(255), primary_key=True)
    sess: Mapped[dict] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored here is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
