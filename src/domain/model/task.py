# domain/model/task.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from domain.model.errors import ValidationError

TITLE_MAX_LENGTH = 255


class TaskStatus(str, Enum):
    """Closed set of task states."""
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'

    @classmethod
    def parse(cls, value: str | TaskStatus | None) -> TaskStatus:
        """Parse a wire value. None means the default status."""
        if value is None:
            return cls.PENDING
        try:
            return cls(value)
        except ValueError:
            allowed = ', '.join(s.value for s in cls)
            raise ValidationError(f"Invalid status '{value}'. Expected one of: {allowed}") from None


class _Unset:
    """Marker for a field that was not provided in a partial update."""

    _instance: _Unset | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'UNSET'


UNSET: Any = _Unset()


def validate_title(title: str | None) -> str:
    """Return the title unchanged, or raise ValidationError when it is blank or too long."""
    if title is None or not title.strip():
        raise ValidationError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


@dataclass
class Task:
    """A unit of work owned by exactly one user."""
    id: str
    title: str
    user_id: str
    status: TaskStatus = TaskStatus.PENDING
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TaskUpdate:
    """Partial update. Fields left as UNSET are not touched.

    ``description=None`` clears the description; ``title`` and ``status``
    cannot be cleared.
    """
    title: Any = field(default=UNSET)
    description: Any = field(default=UNSET)
    status: Any = field(default=UNSET)

    def validated(self) -> TaskUpdate:
        """Return a copy with title checked and status parsed."""
        title = self.title
        if title is not UNSET:
            title = validate_title(title)

        status = self.status
        if status is not UNSET:
            if status is None:
                raise ValidationError("Status cannot be null")
            status = TaskStatus.parse(status)

        return TaskUpdate(title=title, description=self.description, status=status)

    def provided(self) -> dict[str, Any]:
        """Only the fields that were explicitly given."""
        return {
            name: value
            for name, value in (
                ('title', self.title),
                ('description', self.description),
                ('status', self.status),
            )
            if value is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.provided()
