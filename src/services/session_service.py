"""Session lifecycle: issue, resolve and destroy server-side sessions.

The store is the single source of truth. Nothing is cached in-process, so a
destroyed or expired token can never resolve again.
"""

import logging
import os
import secrets
from datetime import datetime, timedelta, timezone

from domain.model.errors import SessionDestroyError
from domain.model.session import Session
from port.session_store import SessionStore

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=float(os.getenv("SESSION_TTL_HOURS", "24")))
TOKEN_BYTES = 32


def start_session(store: SessionStore, user_id: str, now: datetime | None = None) -> Session:
    """Create and persist a new session for ``user_id``."""
    now = now or datetime.now(timezone.utc)
    session = Session(
        token=secrets.token_urlsafe(TOKEN_BYTES),
        user_id=user_id,
        expires_at=now + SESSION_TTL,
    )
    store.save(session)
    logger.info("Session started", extra={"userId": user_id})
    return session


def resolve_session(store: SessionStore, token: str | None, now: datetime | None = None) -> str | None:
    """Map a token to its user id. None for unknown or expired tokens."""
    if not token:
        return None

    session = store.get(token)
    if session is None:
        return None

    if session.is_expired(now):
        # Expired rows are dropped on sight; a failure here only delays cleanup
        try:
            store.delete(token)
        except SessionDestroyError:
            logger.warning("Could not discard expired session", extra={"userId": session.user_id})
        else:
            logger.debug("Expired session discarded", extra={"userId": session.user_id})
        return None

    return session.user_id


def end_session(store: SessionStore, token: str | None) -> None:
    """Destroy a session. Unknown tokens are fine.

    Raises:
        SessionDestroyError: the store could not remove the row
    """
    if not token:
        return
    store.delete(token)


def purge_expired_sessions(store: SessionStore, now: datetime | None = None) -> int:
    removed = store.purge_expired(now or datetime.now(timezone.utc))
    if removed:
        logger.info("Expired sessions purged", extra={"count": removed})
    return removed
