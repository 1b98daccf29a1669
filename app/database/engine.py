from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def normalize_database_url(url: str) -> str:
    """Force the synchronous psycopg2 driver for PostgreSQL URLs."""
    if url.startswith("postgresql+asyncpg://"):
        return url.replace("postgresql+asyncpg://", "postgresql+psycopg2://")
    if (
        url.startswith("postgresql://")
        and "psycopg2" not in url
        and "asyncpg" not in url
    ):
        return url.replace("postgresql://", "postgresql+psycopg2://")
    return url


DATABASE_URL = normalize_database_url(settings.DATABASE_URL)

if DATABASE_URL.startswith("sqlite"):
    # Local development and tests. `timeout` bounds the wait on the file lock.
    engine = create_engine(
        DATABASE_URL,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        connect_args={
            "check_same_thread": False,
            "timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
        },
    )
else:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        pool_recycle=3600,
        connect_args={
            "connect_timeout": settings.DB_CONNECT_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
