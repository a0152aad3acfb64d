"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from domain.model.task import Task, TaskUpdate
from domain.model.user import User


class SignupRequest(BaseModel):
    """Request model for user registration."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: str
    password: str


class UserResponse(BaseModel):
    """User as seen by API consumers. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(**user.public_dict())


class AuthResponse(BaseModel):
    """Response model for signup and login."""
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class TaskCreateRequest(BaseModel):
    """Request model for creating a task. Status defaults to pending."""
    title: str
    description: Optional[str] = None
    status: Optional[str] = None


class TaskUpdateRequest(BaseModel):
    """Partial update: only keys present in the body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None

    def to_domain(self) -> TaskUpdate:
        return TaskUpdate(**{name: getattr(self, name) for name in self.model_fields_set})


class TaskResponse(BaseModel):
    """Response model for a task."""
    id: str = Field(..., description="Task ID")
    title: str
    description: Optional[str] = None
    status: str = Field(..., description="pending, in-progress or completed")
    user_id: str = Field(..., description="Owning user ID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            user_id=task.user_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
