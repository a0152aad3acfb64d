"""Authentication routes (signup, login, logout, me)."""

import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_session_store, get_user_repo
from api.models import AuthResponse, LoginRequest, MessageResponse, SignupRequest, UserResponse
from api.security import clear_session_cookie, get_auth_context, set_session_cookie
from domain.model.session import AuthContext
from port.session_store import SessionStore
from port.user_repository import UserRepository
from services import auth_service, session_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _open_session(
    response: Response,
    sessions: SessionStore,
    user_id: str,
    previous_token: str | None,
) -> None:
    """Issue a fresh session cookie, dropping whatever session the client had."""
    if previous_token:
        session_service.end_session(sessions, previous_token)
    session = session_service.start_session(sessions, user_id)
    set_session_cookie(response, session)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    response: Response,
    auth: AuthContext = Depends(get_auth_context),
    repo: UserRepository = Depends(get_user_repo),
    sessions: SessionStore = Depends(get_session_store),
):
    """Register a new user and log them in.

    Raises:
        DuplicateEmailError: 400 "Email already exists"
        ValidationError: 400
    """
    user = auth_service.register(repo, name=request.name, email=request.email, password=request.password)
    _open_session(response, sessions, user.id, auth.session_token)

    logger.info("User registered", extra={"userId": user.id})
    return AuthResponse(message="User registered successfully", user=UserResponse.from_domain(user))


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    response: Response,
    auth: AuthContext = Depends(get_auth_context),
    repo: UserRepository = Depends(get_user_repo),
    sessions: SessionStore = Depends(get_session_store),
):
    """Check credentials and set the session cookie.

    Raises:
        InvalidCredentialsError: 401 "Invalid credentials"
    """
    user = auth_service.authenticate(repo, email=request.email, password=request.password)
    _open_session(response, sessions, user.id, auth.session_token)

    logger.info("User logged in", extra={"userId": user.id})
    return AuthResponse(message="Login successful", user=UserResponse.from_domain(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionStore = Depends(get_session_store),
):
    """Destroy the current session. Succeeds even without one.

    Raises:
        SessionDestroyError: 500 "Logout failed"
    """
    session_service.end_session(sessions, auth.session_token)
    clear_session_cookie(response)

    if auth.user_id:
        logger.info("User logged out", extra={"userId": auth.user_id})
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
def get_me(
    auth: AuthContext = Depends(get_auth_context),
    repo: UserRepository = Depends(get_user_repo),
):
    """Current user without the password hash; 401 "Not authenticated" otherwise."""
    return UserResponse.from_domain(auth_service.get_current_user(repo, auth))
