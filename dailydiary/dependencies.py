"""
Access gateway: turns the session cookie into a concrete User.

Every diary route depends on get_current_user, so handlers below this
point only ever see a resolved, existing user.
"""
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dailydiary.auth import get_session
from dailydiary.database import get_db
from dailydiary.exceptions import Unauthenticated, SessionInvalid
from dailydiary.models import User
from dailydiary.users import find_by_id


def resolve_user(db: Session, session_id: Optional[str]) -> User:
    """
    Resolve a session token to its user.

    Raises:
        Unauthenticated: no token, or the token is unknown or expired
        SessionInvalid: the session points at a user that no longer exists
    """
    if not session_id:
        raise Unauthenticated()

    session = get_session(db, session_id)
    if session is None:
        raise Unauthenticated()

    user = find_by_id(db, session.user_id)
    if user is None:
        raise SessionInvalid()

    return user


def get_current_user(
    session_id: Optional[str] = Cookie(None, alias="session_id"),
    db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency for protected routes.

    Returns 401 if the request carries no valid session.
    """
    try:
        return resolve_user(db, session_id)
    except (Unauthenticated, SessionInvalid) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message
        )
