"""In-memory implementation of SessionStore for testing."""

from datetime import datetime

from domain.model.errors import SessionDestroyError
from domain.model.session import Session


class FakeSessionStore:
    def __init__(self):
        self.store: dict[str, Session] = {}
        self.fail_on_delete = False

    def save(self, session: Session) -> None:
        self.store[session.token] = session

    def get(self, token: str) -> Session | None:
        return self.store.get(token)

    def delete(self, token: str) -> bool:
        if self.fail_on_delete:
            raise SessionDestroyError()
        return self.store.pop(token, None) is not None

    def purge_expired(self, now: datetime) -> int:
        expired = [t for t, s in self.store.items() if s.is_expired(now)]
        for token in expired:
            del self.store[token]
        return len(expired)
