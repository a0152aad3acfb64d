"""Authorization guard shared by the REST and GraphQL façades."""

from domain.model.errors import NotFoundError, UnauthenticatedError
from domain.model.session import AuthContext
from domain.model.task import Task


def require_user(auth: AuthContext | None) -> str:
    """Return the caller's user id or raise UnauthenticatedError."""
    if auth is None or not auth.is_authenticated:
        raise UnauthenticatedError()
    return auth.user_id


def ensure_owner(user_id: str, task: Task | None, message: str | None = None) -> Task:
    """Pass the task through only if it exists and belongs to ``user_id``.

    Missing and foreign tasks raise the same NotFoundError.
    """
    if task is None or task.user_id != user_id:
        raise NotFoundError(message)
    return task
