"""In-memory implementation of TaskRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.task import Task, TaskStatus, TaskUpdate


class FakeTaskRepository:
    def __init__(self):
        self.store: dict[str, Task] = {}

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task:
        now = datetime.now(timezone.utc)
        task = Task(
            id=uuid.uuid4().hex,
            title=title,
            description=description,
            status=status,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self.store[task.id] = task
        return replace(task)

    def update(self, user_id: str, task_id: str, changes: TaskUpdate) -> Task | None:
        task = self._owned(user_id, task_id)
        if task is None:
            return None

        for name, value in changes.provided().items():
            setattr(task, name, value)
        task.updated_at = datetime.now(timezone.utc)
        return replace(task)

    def delete(self, user_id: str, task_id: str) -> bool:
        if self._owned(user_id, task_id) is None:
            return False
        del self.store[task_id]
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str, task_id: str) -> Task | None:
        task = self._owned(user_id, task_id)
        return replace(task) if task else None

    def list_by_owner(self, user_id: str) -> list[Task]:
        return [replace(t) for t in self.store.values() if t.user_id == user_id]

    def _owned(self, user_id: str, task_id: str) -> Task | None:
        task = self.store.get(task_id)
        if task is None or task.user_id != user_id:
            return None
        return task
