"""
Admin login and first-boot account seeding.
"""
import asyncio
import logging
from functools import lru_cache

from portfolio.config import settings
from portfolio.database import AsyncSessionLocal
from portfolio.exceptions import AuthorizationError
from portfolio.repository import PortfolioRepository
from portfolio.utils.auth import hash_password, verify_password
from portfolio.utils.session_auth import create_session_token

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Checked against when the username is unknown so both failure paths cost one bcrypt check
    return hash_password("unused-dummy-password")


async def authenticate(repo: PortfolioRepository, username: str, password: str) -> str:
    """
    Check credentials and return a new session token.

    Raises:
        AuthorizationError: On unknown username, wrong password, or an account
            other than ADMIN_USERNAME (same error for all)
    """
    user = await repo.get_user_by_username(username)
    stored_hash = user.password if user else _dummy_hash()

    password_ok = await asyncio.to_thread(verify_password, password, stored_hash)
    # Only the configured admin may hold a session; any other stored account fails the same way
    if not user or not password_ok or user.username != settings.ADMIN_USERNAME:
        logger.warning("Failed admin login attempt")
        raise AuthorizationError("Invalid credentials")

    logger.info(f"Admin login: {username}")
    return create_session_token(user.username)


async def seed_admin_user(repo: PortfolioRepository) -> bool:
    """
    Create the single admin account when the users table is empty and
    ADMIN_PASSWORD is configured. Returns True if a user was created.
    """
    if not settings.ADMIN_PASSWORD:
        return False
    if await repo.count_users() > 0:
        return False

    password_hash = await asyncio.to_thread(hash_password, settings.ADMIN_PASSWORD)
    await repo.create_user(settings.ADMIN_USERNAME, password_hash)
    logger.info(f"Admin user seeded: '{settings.ADMIN_USERNAME}'")
    return True


async def ensure_admin_user() -> None:
    """Startup hook: seed the admin account. Failures are logged, never raised."""
    try:
        async with AsyncSessionLocal() as session:
            await seed_admin_user(PortfolioRepository(session))
    except Exception as e:
        logger.error(f"Admin seeding failed: {str(e)}", exc_info=True)
