"""GraphQL object types."""

from typing import Optional

import strawberry

from domain.model.task import Task
from domain.model.user import User


@strawberry.type(name="User", description="A registered user")
class UserType:
    id: strawberry.ID
    name: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserType":
        return cls(id=strawberry.ID(user.id), name=user.name, email=user.email)


@strawberry.type(name="Task", description="A task owned by the authenticated user")
class TaskType:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: str
    user_id: strawberry.ID

    @classmethod
    def from_domain(cls, task: Task) -> "TaskType":
        return cls(
            id=strawberry.ID(task.id),
            title=task.title,
            description=task.description,
            status=task.status.value,
            user_id=strawberry.ID(task.user_id),
        )
