"""Session domain models."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class Session:
    """Server-side session: opaque token mapped to a user until expiry."""
    token: str
    user_id: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    def payload(self) -> dict:
        """Serialized session body stored next to the token."""
        return {'userId': self.user_id}


@dataclass(frozen=True)
class AuthContext:
    """What a request knows about its caller once the session cookie is resolved.

    Both API façades build one of these and hand it to the services,
    so authorization never sees a framework request object.
    """
    user_id: str | None = None
    session_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = AuthContext()
