"""
Admin session routes: login, logout and session probe.
"""
from fastapi import APIRouter, Depends, Header, Request, Response
from typing import Optional
import logging

from portfolio.repository import PortfolioRepository, get_repository
from portfolio.schemas import LoginRequest
from portfolio.services import auth_service
from portfolio.utils.rate_limit import limiter, RATE_LIMITS
from portfolio.utils.session_auth import (
    clear_session_cookie,
    get_session,
    is_admin_session,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login")
@limiter.limit(RATE_LIMITS["login"])
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Verify admin credentials and set the session cookie.
    Unknown username and wrong password produce the same 401 response.
    """
    token = await auth_service.authenticate(repo, credentials.username, credentials.password)
    set_session_cookie(response, token)
    return {"success": True, "username": credentials.username}


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie. Safe to call without a session."""
    clear_session_cookie(response)
    return {"success": True}


@router.get("/session")
async def session_status(
    request: Request,
    authorization: Optional[str] = Header(None)
):
    payload = get_session(request, authorization)
    if not is_admin_session(payload):
        return {"authenticated": False}
    return {"authenticated": True, "username": payload["sub"]}
