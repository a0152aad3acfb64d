"""SQLAlchemy implementation of TaskRepository."""

import uuid
from logging import getLogger

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from adapter.sql.connection import Database
from adapter.sql.tables import TaskRecord, as_utc
from domain.model.errors import StorageError
from domain.model.task import Task, TaskStatus, TaskUpdate

logger = getLogger(__name__)


class SqlTaskRepository:
    def __init__(self, db: Database):
        self.db = db

    def _to_domain(self, row: TaskRecord) -> Task:
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            status=TaskStatus(row.status),
            user_id=row.user_id,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )

    @staticmethod
    def _owned(user_id: str, task_id: str):
        return select(TaskRecord).where(TaskRecord.id == task_id, TaskRecord.user_id == user_id)

    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        task_id = uuid.uuid4().hex
        try:
            with self.db.session() as session:
                row = TaskRecord(
                    id=task_id,
                    title=title,
                    description=description,
                    status=status,
                    user_id=user_id,
                )
                session.add(row)
                session.flush()
                return self._to_domain(row)
        except SQLAlchemyError as e:
            logger.error("Failed to create task", extra={"userId": user_id, "error": str(e)})
            raise StorageError() from e

    def get_by_id(self, user_id: str, task_id: str) -> Task | None:
        try:
            with self.db.session() as session:
                row = session.scalars(self._owned(user_id, task_id)).first()
                return self._to_domain(row) if row else None
        except SQLAlchemyError as e:
            logger.error("Failed to get task", extra={"userId": user_id, "taskId": task_id, "error": str(e)})
            raise StorageError() from e

    def list_by_owner(self, user_id: str) -> list[Task]:
        # insertion order
        stmt = select(TaskRecord).where(TaskRecord.user_id == user_id).order_by(TaskRecord.created_at)
        try:
            with self.db.session() as session:
                return [self._to_domain(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error("Failed to list tasks", extra={"userId": user_id, "error": str(e)})
            raise StorageError() from e

    def update(self, user_id: str, task_id: str, changes: TaskUpdate) -> Task | None:
        try:
            with self.db.session() as session:
                row = session.scalars(self._owned(user_id, task_id)).first()
                if row is None:
                    return None
                for name, value in changes.provided().items():
                    setattr(row, name, value)
                session.flush()
                return self._to_domain(row)
        except SQLAlchemyError as e:
            logger.error("Failed to update task", extra={"userId": user_id, "taskId": task_id, "error": str(e)})
            raise StorageError() from e

    def delete(self, user_id: str, task_id: str) -> bool:
        stmt = delete(TaskRecord).where(TaskRecord.id == task_id, TaskRecord.user_id == user_id)
        try:
            with self.db.session() as session:
                result = session.execute(stmt)
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("Failed to delete task", extra={"userId": user_id, "taskId": task_id, "error": str(e)})
            raise StorageError() from e
