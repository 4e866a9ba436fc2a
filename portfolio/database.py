"""
Database connection and session management for SQLAlchemy 2.0.
Async engine against PostgreSQL (asyncpg) in production, SQLite (aiosqlite) otherwise.
"""
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from urllib.parse import urlparse
import logging

from portfolio.config import settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

_engine_args = {
    "echo": False,  # Set to True for SQL query logging in development
}

# Pool settings only apply to PostgreSQL (not SQLite)
if settings.DATABASE_URL and settings.DATABASE_URL.startswith("postgresql"):
    _engine_args.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,  # Managed databases drop idle connections
        "pool_recycle": 1800,
        "connect_args": {
            "server_settings": {
                "application_name": "artist-portfolio-api"
            }
        }
    })

engine = create_async_engine(
    settings.DATABASE_URL if settings.DATABASE_URL else "sqlite+aiosqlite:///:memory:",
    **_engine_args
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Provides one session per request with commit on success and rollback on error.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {str(e)}")
            raise
        finally:
            await session.close()


def _describe_database_url(url: str) -> tuple[bool, str]:
    """
    Check the database URL scheme and return (is_valid, diagnostic_message).
    The password is never included in the message.
    """
    if not url:
        return False, "DATABASE_URL is empty"

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"

    if not parsed.scheme.startswith(("postgresql", "sqlite")):
        return False, f"Unsupported database URL scheme: {parsed.scheme}"

    if parsed.scheme.startswith("sqlite"):
        return True, f"SQLite database at {parsed.path or ':memory:'}"

    if not parsed.hostname:
        return False, "No hostname found in DATABASE_URL"

    return True, f"Host: {parsed.hostname}, Port: {parsed.port or 5432}, Database: {parsed.path or '/postgres'}"


async def init_db():
    """
    Verify the database connection on startup.
    Schema changes are applied with Alembic, not here.
    """
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set, skipping database initialization")
        return

    is_valid, diagnostic = _describe_database_url(settings.DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection initialized successfully")
    except Exception as e:
        logger.error(
            f"Database connection failed ({type(e).__name__}): {str(e)}\n"
            f"Diagnostic: {diagnostic}"
        )
        raise


async def close_db():
    """Dispose of pooled connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
