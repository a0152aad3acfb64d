"""Auth service: registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers and resolvers map to wire errors.
"""

import bcrypt
from email_validator import EmailNotValidError, validate_email

from domain.model.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthenticatedError,
    ValidationError,
)
from domain.model.session import AuthContext
from domain.model.user import User
from port.user_repository import UserRepository
from services.guard import require_user

BCRYPT_ROUNDS = 10

# Compared against when the email is unknown, so both failure paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup: stripped, lower-case."""
    return (email or "").strip().lower()


def _validate_signup(name: str, email: str, password: str) -> None:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    # Same validator pydantic's EmailStr uses, so REST and GraphQL accept the same addresses
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("A valid email is required") from e
    if not password:
        raise ValidationError("Password is required")
    # bcrypt only looks at the first 72 bytes
    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password must be at most 72 bytes")


def register(repo: UserRepository, name: str, email: str, password: str) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        DuplicateEmailError: email already registered
        ValidationError: missing name/password or malformed email
    """
    email = normalize_email(email)
    _validate_signup(name, email, password)

    if repo.get_by_email(email):
        raise DuplicateEmailError()

    password_hash = _hash_password(password)
    return repo.create(email=email, password_hash=password_hash, name=name.strip())


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Doesn't reveal whether the email exists.

    Raises:
        InvalidCredentialsError: unknown email or wrong password
    """
    user = repo.get_by_email(normalize_email(email))
    if user is None or not user.password_hash:
        _verify_password(password or "", _DUMMY_HASH)
        raise InvalidCredentialsError()

    if not _verify_password(password or "", user.password_hash):
        raise InvalidCredentialsError()
    return user


def get_current_user(repo: UserRepository, auth: AuthContext) -> User:
    """Return the user behind the session.

    Raises:
        UnauthenticatedError: no session, or the session's user is gone
    """
    user_id = require_user(auth)
    user = repo.get_by_id(user_id)
    if user is None:
        raise UnauthenticatedError()
    return user
