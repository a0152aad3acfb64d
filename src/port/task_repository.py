"""Port definition for TaskRepository.

Every method is scoped by the owning user: a task that belongs to someone
else behaves exactly like a task that does not exist.
"""

from typing import Protocol

from domain.model.task import Task, TaskStatus, TaskUpdate


class TaskRepository(Protocol):
    def create(
        self,
        user_id: str,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.PENDING,
    ) -> Task: ...

    def get_by_id(self, user_id: str, task_id: str) -> Task | None: ...

    def list_by_owner(self, user_id: str) -> list[Task]: ...

    def update(self, user_id: str, task_id: str, changes: TaskUpdate) -> Task | None: ...

    def delete(self, user_id: str, task_id: str) -> bool: ...
