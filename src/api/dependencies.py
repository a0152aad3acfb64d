from fastapi import Depends, HTTPException, Request

from adapter.sql.connection import Database
from adapter.sql.session_store import SqlSessionStore
from adapter.sql.task_repository import SqlTaskRepository
from adapter.sql.user_repository import SqlUserRepository
from port.session_store import SessionStore
from port.task_repository import TaskRepository
from port.user_repository import UserRepository


def get_database(request: Request) -> Database:
    """Database handle created by the app lifespan, 503 if it never came up."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_user_repo(db: Database = Depends(get_database)) -> UserRepository:
    return SqlUserRepository(db)


def get_task_repo(db: Database = Depends(get_database)) -> TaskRepository:
    return SqlTaskRepository(db)


def get_session_store(db: Database = Depends(get_database)) -> SessionStore:
    return SqlSessionStore(db)
