from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from dailydiary.database import Base


class User(Base):
    """
    Diary owner. Stores credentials and metadata.

    Design notes:
    - username is unique, indexed, and never changes after registration
    - password_hash never leaves the database layer
    - users are never deleted
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    diaries = relationship("Diary", back_populates="owner", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"


class Diary(Base):
    """
    A dated diary entry owned by exactly one user.

    user_id is set once at creation. Every lookup must filter on it,
    see dailydiary.diaries.find_by_id_for_owner.
    """
    __tablename__ = "diaries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    entry_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    owner = relationship("User", back_populates="diaries")

    # Dashboard query: one owner's entries, newest first
    __table_args__ = (
        Index('ix_diary_owner_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Diary(id={self.id}, user_id={self.user_id})>"


class Session(Base):
    """
    A signed-in browser: the row behind the session_id cookie.

    Rows are written at login and removed at logout, at password reset
    (every row of the user) and by the startup purge once expires_at passes.
    Only user_id is read back; the diary routes never see this table.
    """
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # get_session filters on both columns
    __table_args__ = (
        Index('ix_session_token_expiry', 'session_id', 'expires_at'),
    )

    def __repr__(self):
        return f"<Session(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
