import logging

from fastapi import APIRouter, Depends, HTTPException, status, Response, Cookie
from sqlalchemy.orm import Session
from typing import Optional
from dailydiary import users
from dailydiary.database import get_db
from dailydiary.models import User
from dailydiary.schemas import (
    RegisterRequest, LoginRequest, ResetPasswordRequest,
    UserResponse, UsernameAvailability, MessageResponse
)
from dailydiary.auth import (
    authenticate, change_password, create_session, delete_session, delete_user_sessions
)
from dailydiary.dependencies import get_current_user
from dailydiary.exceptions import (
    UsernameTaken, WeakPassword, PasswordMismatch, InvalidCredentials,
    UserNotFound, CurrentPasswordWrong
)
from dailydiary.config import get_settings

router = APIRouter(tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_id"


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create new user account.

    Does not sign the user in; the client logs in afterwards.

    Error cases:
    - 400: Passwords do not match, or password too short
    - 409: Username already taken
    - 422: Blank username or password
    """
    if request.password != request.confirm_password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=PasswordMismatch.message
        )

    try:
        return users.register(db, request.username, request.password)
    except UsernameTaken as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except WeakPassword as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("/username-available", response_model=UsernameAvailability)
async def username_available(username: str, db: Session = Depends(get_db)):
    """Lets the registration form check a name before submitting."""
    username = username.strip()
    available = bool(username) and users.username_available(db, username)
    return UsernameAvailability(username=username, available=available)


@router.post("/login", response_model=UserResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and create session.

    Security notes:
    - Generic error message prevents username enumeration
    - No indication whether username or password was wrong
    """
    user = authenticate(db, request.username, request.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=InvalidCredentials.message
        )

    session_id = create_session(db, user.id)
    _set_session_cookie(response, session_id)

    logger.info("User id=%s signed in", user.id)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Invalidate session and clear cookie.
    """
    delete_session(db, session_id)
    _clear_session_cookie(response)

    logger.info("User id=%s signed out", user.id)
    return MessageResponse(message="Signed out successfully.")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: User = Depends(get_current_user)):
    """
    Get authenticated user's information.
    """
    return user


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Change a password by re-verifying the current one.

    No session is needed. On success every session of the user is
    deleted and the caller must log in again.

    Error cases:
    - 400: New passwords do not match, current password wrong, new password too short
    - 404: Unknown username
    - 422: Blank fields or new password outside 6-100 characters
    """
    if not request.passwords_match():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New passwords do not match"
        )

    user = users.find_by_username(db, request.username)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=UserNotFound.message)

    try:
        updated = change_password(db, user.id, request.current_password, request.new_password)
    except WeakPassword as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=CurrentPasswordWrong.message
        )

    delete_user_sessions(db, user.id)
    _clear_session_cookie(response)

    return MessageResponse(message="Password updated. Please log in.")


def _cookie_options() -> dict:
    # Browsers reject an explicit Domain=localhost, so leave it unset there
    domain = settings.cookie_domain if settings.cookie_domain != "localhost" else None
    return {
        "path": "/",
        "domain": domain,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
    }


def _set_session_cookie(response: Response, session_id: str):
    """Hand the diary session token to the browser; nothing else goes in the cookie."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        httponly=settings.cookie_httponly,
        max_age=settings.session_expire_hours * 3600,
        **_cookie_options()
    )


def _clear_session_cookie(response: Response):
    """Expire the browser's copy of the token after logout or password reset."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value="",
        httponly=True,
        max_age=0,
        **_cookie_options()
    )
