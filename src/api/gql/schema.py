"""GraphQL schema and resolvers.

Resolvers are thin: they pull the AuthContext and repositories out of the
request context and call the same services as the REST routes.
"""

import logging
from typing import Optional

import strawberry
from fastapi import Depends
from graphql import GraphQLError
from starlette.concurrency import run_in_threadpool
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from api.dependencies import get_session_store, get_task_repo, get_user_repo
from api.gql.types import TaskType, UserType
from api.security import clear_session_cookie, get_auth_context, set_session_cookie
from domain.model.errors import DomainError, StorageError
from domain.model.session import AuthContext
from domain.model.task import UNSET, TaskUpdate
from port.session_store import SessionStore
from port.task_repository import TaskRepository
from port.user_repository import UserRepository
from services import auth_service, session_service, task_service
from services.guard import require_user

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


async def get_context(
    auth: AuthContext = Depends(get_auth_context),
    users: UserRepository = Depends(get_user_repo),
    tasks: TaskRepository = Depends(get_task_repo),
    sessions: SessionStore = Depends(get_session_store),
) -> dict:
    """Per-request context; Strawberry adds ``request`` and ``response``."""
    return {"auth": auth, "users": users, "tasks": tasks, "sessions": sessions}


def _provided(value):
    return UNSET if value is strawberry.UNSET else value


def _login(context: dict, email: str, password: str) -> str:
    auth: AuthContext = context["auth"]
    sessions: SessionStore = context["sessions"]

    user = auth_service.authenticate(context["users"], email=email, password=password)
    if auth.session_token:
        session_service.end_session(sessions, auth.session_token)
    session = session_service.start_session(sessions, user.id)
    set_session_cookie(context["response"], session)

    logger.info("User logged in", extra={"userId": user.id})
    return "Login successful"


def _logout(context: dict) -> str:
    auth: AuthContext = context["auth"]
    user_id = require_user(auth)

    session_service.end_session(context["sessions"], auth.session_token)
    clear_session_cookie(context["response"])

    logger.info("User logged out", extra={"userId": user_id})
    return "Logout successful"


# bcrypt and the SQL adapters block, so every resolver hands its work to the threadpool
@strawberry.type
class Query:
    @strawberry.field(description="Retrieve the authenticated user")
    async def me(self, info: Info) -> Optional[UserType]:
        user = await run_in_threadpool(auth_service.get_current_user, info.context["users"], info.context["auth"])
        return UserType.from_domain(user)

    @strawberry.field(description="Retrieve all tasks of the authenticated user")
    async def get_tasks(self, info: Info) -> list[TaskType]:
        tasks = await run_in_threadpool(task_service.list_tasks, info.context["tasks"], info.context["auth"])
        return [TaskType.from_domain(t) for t in tasks]

    @strawberry.field(description="Retrieve a single task by its ID, null if not found")
    async def get_task(self, info: Info, id: strawberry.ID) -> Optional[TaskType]:
        task = await run_in_threadpool(task_service.get_task, info.context["tasks"], info.context["auth"], str(id))
        return TaskType.from_domain(task) if task else None


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Register a new user")
    async def signup(self, info: Info, name: str, email: str, password: str) -> Optional[UserType]:
        user = await run_in_threadpool(
            auth_service.register, info.context["users"], name=name, email=email, password=password
        )
        logger.info("User registered", extra={"userId": user.id})
        return UserType.from_domain(user)

    @strawberry.mutation(description="Authenticate user and start a session")
    async def login(self, info: Info, email: str, password: str) -> str:
        return await run_in_threadpool(_login, info.context, email, password)

    @strawberry.mutation(description="Logout the current user")
    async def logout(self, info: Info) -> str:
        return await run_in_threadpool(_logout, info.context)

    @strawberry.mutation(description="Create a new task")
    async def create_task(
        self,
        info: Info,
        title: str,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Optional[TaskType]:
        task = await run_in_threadpool(
            task_service.create_task,
            info.context["tasks"],
            info.context["auth"],
            title=title,
            description=description,
            status=status,
        )
        return TaskType.from_domain(task)

    @strawberry.mutation(description="Update an existing task; omitted fields are left alone")
    async def update_task(
        self,
        info: Info,
        id: strawberry.ID,
        title: Optional[str] = strawberry.UNSET,
        description: Optional[str] = strawberry.UNSET,
        status: Optional[str] = strawberry.UNSET,
    ) -> Optional[TaskType]:
        changes = TaskUpdate(
            title=_provided(title),
            description=_provided(description),
            status=_provided(status),
        )
        task = await run_in_threadpool(
            task_service.update_task, info.context["tasks"], info.context["auth"], str(id), changes
        )
        return TaskType.from_domain(task)

    @strawberry.mutation(description="Delete a task by its ID")
    async def delete_task(self, info: Info, id: strawberry.ID) -> Optional[str]:
        await run_in_threadpool(task_service.delete_task, info.context["tasks"], info.context["auth"], str(id))
        return "Task deleted successfully"


def _is_expected(error: GraphQLError) -> bool:
    """Domain errors (other than storage failures) are part of the API contract."""
    original = error.original_error
    return isinstance(original, DomainError) and not isinstance(original, StorageError)


def _should_mask_error(error: GraphQLError) -> bool:
    original = error.original_error
    if original is None or isinstance(original, GraphQLError):
        return False
    return not _is_expected(error)


class TaskSchema(strawberry.Schema):
    def process_errors(self, errors, execution_context=None) -> None:
        # Expected domain errors are client mistakes, not server faults
        unexpected = [e for e in errors if not _is_expected(e)]
        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = TaskSchema(
    query=Query,
    mutation=Mutation,
    extensions=[lambda: MaskErrors(should_mask_error=_should_mask_error, error_message=INTERNAL_ERROR_MESSAGE)],
)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
