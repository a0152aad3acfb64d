"""Task service: owner-scoped task operations.

Every entry point goes through the guard first, so both API façades get the
same authentication and ownership rules.
"""

import logging

from domain.model.errors import NotFoundError
from domain.model.session import AuthContext
from domain.model.task import Task, TaskStatus, TaskUpdate, validate_title
from port.task_repository import TaskRepository
from services.guard import ensure_owner, require_user

logger = logging.getLogger(__name__)

NOT_FOUND_VIEW = "Task does not exist or you do not have permission to view it."
NOT_FOUND_MODIFY = "Task does not exist or you do not have permission to modify it."
NOT_FOUND_DELETE = "Task does not exist or you do not have permission to delete it."


def list_tasks(repo: TaskRepository, auth: AuthContext) -> list[Task]:
    user_id = require_user(auth)
    return repo.list_by_owner(user_id)


def get_task(repo: TaskRepository, auth: AuthContext, task_id: str) -> Task | None:
    """Return the caller's task, or None when it is missing or not theirs."""
    user_id = require_user(auth)
    task = repo.get_by_id(user_id, task_id)
    if task is None or task.user_id != user_id:
        return None
    return task


def create_task(
    repo: TaskRepository,
    auth: AuthContext,
    title: str,
    description: str | None = None,
    status: str | TaskStatus | None = None,
) -> Task:
    """Create a task owned by the caller.

    Raises:
        UnauthenticatedError: no session
        ValidationError: blank title or unknown status
    """
    user_id = require_user(auth)
    task = repo.create(
        user_id=user_id,
        title=validate_title(title),
        description=description,
        status=TaskStatus.parse(status),
    )
    logger.info("Task created", extra={"userId": user_id, "taskId": task.id})
    return task


def update_task(repo: TaskRepository, auth: AuthContext, task_id: str, changes: TaskUpdate) -> Task:
    """Apply only the provided fields.

    Raises:
        UnauthenticatedError: no session
        NotFoundError: task missing or owned by someone else
        ValidationError: blank title or unknown status
    """
    user_id = require_user(auth)
    current = ensure_owner(user_id, repo.get_by_id(user_id, task_id), NOT_FOUND_MODIFY)

    changes = changes.validated()
    if changes.is_empty:
        return current

    updated = repo.update(user_id, task_id, changes)
    if updated is None:
        # Deleted between the read and the write
        raise NotFoundError(NOT_FOUND_MODIFY)

    logger.info("Task updated", extra={"userId": user_id, "taskId": task_id, "fields": sorted(changes.provided())})
    return updated


def delete_task(repo: TaskRepository, auth: AuthContext, task_id: str) -> None:
    """Hard delete.

    Raises:
        UnauthenticatedError: no session
        NotFoundError: task missing or owned by someone else
    """
    user_id = require_user(auth)
    if not repo.delete(user_id, task_id):
        raise NotFoundError(NOT_FOUND_DELETE)
    logger.info("Task deleted", extra={"userId": user_id, "taskId": task_id})
