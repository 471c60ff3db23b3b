"""
Credential store: user registration and lookup.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dailydiary.config import get_settings
from dailydiary.exceptions import UsernameTaken, WeakPassword
from dailydiary.models import User
from dailydiary.passwords import hash_password

logger = logging.getLogger(__name__)
settings = get_settings()


def check_password_strength(password: Optional[str]) -> None:
    """Raise WeakPassword if the plaintext is shorter than the configured minimum."""
    if password is None or len(password) < settings.min_password_length:
        raise WeakPassword(
            f"Password must be at least {settings.min_password_length} characters long"
        )


def find_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def find_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def username_available(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is None


def register(db: Session, username: str, password: str) -> User:
    """
    Create a new user account.

    Raises:
        UsernameTaken: username already exists
        WeakPassword: password shorter than the minimum length

    Only the Argon2 hash of the password is stored.
    """
    if not username_available(db, username):
        raise UsernameTaken()

    check_password_strength(password)

    user = User(
        username=username,
        password_hash=hash_password(password),
        created_at=datetime.now(timezone.utc)
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        # Lost a race with a concurrent registration of the same name
        raise UsernameTaken()

    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user
