import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from dailydiary.config import get_settings
from dailydiary.models import User, Session as SessionModel
from dailydiary.passwords import hash_password, verify_password, needs_rehash
from dailydiary.users import find_by_id, find_by_username, check_password_strength

logger = logging.getLogger(__name__)
settings = get_settings()


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """
    Verify submitted credentials.

    Returns the user only when the username exists and the password
    matches. Unknown username and wrong password both return None.
    """
    user = find_by_username(db, username)

    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt for username=%s", username)
        return None

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        db.commit()

    return user


def change_password(db: Session, user_id: int, old_password: str, new_password: str) -> bool:
    """
    Replace a user's password after re-verifying the old one.

    Returns False if the user does not exist or old_password does not
    verify; callers cannot tell the two apart.

    Raises:
        WeakPassword: new_password shorter than the minimum length
    """
    user = find_by_id(db, user_id)

    if not user or not verify_password(old_password, user.password_hash):
        return False

    check_password_strength(new_password)

    user.password_hash = hash_password(new_password)
    db.commit()

    logger.info("Password changed for user id=%s", user_id)
    return True


def generate_session_id() -> str:
    """64 hex characters from the OS random source; this is the whole cookie value."""
    return secrets.token_hex(32)


def create_session(db: Session, user_id: int) -> str:
    """
    Open a diary session for a signed-in user and return its token.

    The row lives for session_expire_hours, matching the cookie max_age.
    """
    now = datetime.now(timezone.utc)
    session = SessionModel(
        session_id=generate_session_id(),
        user_id=user_id,
        created_at=now,
        expires_at=now + timedelta(hours=settings.session_expire_hours)
    )

    db.add(session)
    db.commit()

    return session.session_id


def get_session(db: Session, session_id: str) -> Optional[SessionModel]:
    """Live session for a cookie token; None once it is unknown or past expires_at."""
    return db.query(SessionModel).filter(
        SessionModel.session_id == session_id,
        SessionModel.expires_at > datetime.now(timezone.utc)
    ).first()


def _purge(db: Session, *criteria) -> int:
    removed = db.query(SessionModel).filter(*criteria).delete(synchronize_session=False)
    db.commit()
    return removed


def delete_session(db: Session, session_id: str) -> bool:
    """Sign out one browser. False when the token was already gone."""
    return _purge(db, SessionModel.session_id == session_id) > 0


def delete_user_sessions(db: Session, user_id: int) -> int:
    """Sign a diary owner out everywhere, e.g. after a password reset."""
    removed = _purge(db, SessionModel.user_id == user_id)
    logger.info("Closed %s sessions for user id=%s", removed, user_id)
    return removed


def cleanup_expired_sessions(db: Session) -> int:
    """Drop session rows whose expires_at has passed. Run at startup."""
    return _purge(db, SessionModel.expires_at <= datetime.now(timezone.utc))
