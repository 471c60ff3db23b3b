from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dailydiary.config import get_settings

settings = get_settings()

# check_same_thread=False needed for SQLite with FastAPI
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
    pool_pre_ping=True,
    echo=False
)

# Session factory for database operations
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Dependency that provides database session to route handlers.
    Ensures session is properly closed after request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create all tables defined in models.
    Call this on application startup.
    """
    # Models must be imported so their tables are registered on Base.metadata
    import dailydiary.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
