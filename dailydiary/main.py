import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from dailydiary.auth import cleanup_expired_sessions
from dailydiary.database import init_db, get_db, SessionLocal
from dailydiary.logging_config import setup_logging
from dailydiary.routers import auth_router, diary_router
from dailydiary.config import get_settings

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Creates the schema and purges expired sessions on startup.
    """
    init_db()
    db = SessionLocal()
    try:
        removed = cleanup_expired_sessions(db)
        logger.info("Removed %s expired sessions", removed)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Daily Diary",
    description="Personal diary service with session authentication",
    version="1.0.0",
    lifespan=lifespan
)

if settings.debug:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(auth_router.router)
app.include_router(diary_router.router)


@app.exception_handler(SQLAlchemyError)
async def store_unavailable_handler(request: Request, exc: SQLAlchemyError):
    """
    Persistence failures end the request with a generic message.
    Driver details go to the log only.
    """
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Service temporarily unavailable"}
    )


@app.get("/")
async def root():
    return {
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health(db: Session = Depends(get_db)):
    """
    Database connectivity check.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "error": "Database connection failed"}
        )

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dailydiary.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
