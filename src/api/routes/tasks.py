"""Task REST routes.

Endpoints mirror the GraphQL operations:
- GET /tasks: list the caller's tasks
- POST /tasks: create a task
- GET /tasks/{id}: one task (404 when missing or not the caller's)
- PATCH /tasks/{id}: partial update
- DELETE /tasks/{id}: hard delete
"""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_task_repo
from api.models import MessageResponse, TaskCreateRequest, TaskResponse, TaskUpdateRequest
from api.security import get_auth_context
from domain.model.errors import NotFoundError
from domain.model.session import AuthContext
from port.task_repository import TaskRepository
from services import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    auth: AuthContext = Depends(get_auth_context),
    repo: TaskRepository = Depends(get_task_repo),
):
    return [TaskResponse.from_domain(t) for t in task_service.list_tasks(repo, auth)]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    request: TaskCreateRequest,
    auth: AuthContext = Depends(get_auth_context),
    repo: TaskRepository = Depends(get_task_repo),
):
    task = task_service.create_task(
        repo,
        auth,
        title=request.title,
        description=request.description,
        status=request.status,
    )
    return TaskResponse.from_domain(task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    auth: AuthContext = Depends(get_auth_context),
    repo: TaskRepository = Depends(get_task_repo),
):
    task = task_service.get_task(repo, auth, task_id)
    if task is None:
        raise NotFoundError(task_service.NOT_FOUND_VIEW)
    return TaskResponse.from_domain(task)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    repo: TaskRepository = Depends(get_task_repo),
):
    task = task_service.update_task(repo, auth, task_id, request.to_domain())
    return TaskResponse.from_domain(task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    auth: AuthContext = Depends(get_auth_context),
    repo: TaskRepository = Depends(get_task_repo),
):
    task_service.delete_task(repo, auth, task_id)
    return MessageResponse(message="Task deleted successfully")
