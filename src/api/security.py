"""Session cookie handling and the shared authentication dependency."""

import os
import logging

from fastapi import Depends, Request, Response

from api.dependencies import get_session_store
from domain.model.session import AuthContext, Session
from port.session_store import SessionStore
from services.session_service import SESSION_TTL, resolve_session

logger = logging.getLogger(__name__)

# Cookie configuration
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
COOKIE_SECURE = os.getenv("APP_ENV", "development") == "production"
COOKIE_SAMESITE = "lax"


def get_auth_context(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> AuthContext:
    """Resolve the session cookie into an AuthContext.

    Never raises for a missing or stale cookie: the guard decides whether
    the operation needs a user.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    user_id = resolve_session(sessions, token)
    return AuthContext(user_id=user_id, session_token=token)


def set_session_cookie(response: Response, session: Session) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.token,
        max_age=int(SESSION_TTL.total_seconds()),
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
    )
