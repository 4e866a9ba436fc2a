"""
Signed session tokens and the admin authorization gate.
The session is a JWT stored in an httpOnly cookie; it carries the username
and the admin flag and expires after SESSION_EXPIRE_MINUTES.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Header, Request, Response
from portfolio.config import settings
from portfolio.exceptions import AuthorizationError


ALGORITHM = "HS256"
TOKEN_TYPE = "session"


def create_session_token(username: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed admin session token.

    Args:
        username: Authenticated admin username
        expires_delta: Optional custom lifetime

    Returns:
        str: Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES))

    claims = {
        "sub": username,
        "is_admin": True,
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """
    Decode a session token. Returns None when the signature, expiry or type is invalid.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != TOKEN_TYPE:
        return None
    return payload


def is_admin_session(payload: Optional[dict]) -> bool:
    """Binary capability check: admin flag set and username is the configured admin."""
    if not payload:
        return False
    return payload.get("is_admin") is True and payload.get("sub") == settings.ADMIN_USERNAME


def read_session_token(request: Request, authorization: Optional[str] = None) -> Optional[str]:
    """Session cookie first, then an `Authorization: Bearer` header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token and authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]
    return token


def get_session(request: Request, authorization: Optional[str] = None) -> Optional[dict]:
    token = read_session_token(request, authorization)
    if not token:
        return None
    return decode_session_token(token)


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token (fallback to session cookie)")
) -> dict:
    """
    FastAPI dependency gating every mutating admin endpoint.

    Every failure (no session, bad signature, expired, wrong user) raises the
    same AuthorizationError so the response never reveals which check failed.
    """
    payload = get_session(request, authorization)
    if not is_admin_session(payload):
        raise AuthorizationError("Authentication required")
    return payload


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
