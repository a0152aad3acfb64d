"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers and GraphQL resolvers let them propagate; each façade maps
them to its own wire format (HTTP status + message, or a GraphQL error).
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    default_message = "Domain error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class UnauthenticatedError(DomainError):
    """No valid session was presented."""

    default_message = "Authentication required. Please log in."


class NotFoundError(DomainError):
    """Requested entity does not exist, or belongs to another user.

    The two cases are deliberately reported the same way.
    """

    default_message = "Not found"


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateEmailError(DuplicateError):
    """Signup attempted with an email that is already registered."""

    default_message = "Email already exists"


class InvalidCredentialsError(DomainError):
    """Login failed. Unknown email and wrong password look identical."""

    default_message = "Invalid credentials"


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    default_message = "Invalid input"


class StorageError(DomainError):
    """The underlying store failed. Never retried here."""

    default_message = "Server error"


class SessionDestroyError(StorageError):
    """A session row could not be removed."""

    default_message = "Logout failed"
