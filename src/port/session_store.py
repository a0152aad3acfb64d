"""Port definition for SessionStore."""

from datetime import datetime
from typing import Protocol

from domain.model.session import Session


class SessionStore(Protocol):
    def save(self, session: Session) -> None:
        """Persist a session, replacing any row with the same token."""
        ...

    def get(self, token: str) -> Session | None:
        """Return the stored session, expired or not. None if unknown."""
        ...

    def delete(self, token: str) -> bool:
        """Remove a session. Return False if there was nothing to remove."""
        ...

    def purge_expired(self, now: datetime) -> int:
        """Delete every session that expired before ``now``. Return the count."""
        ...
