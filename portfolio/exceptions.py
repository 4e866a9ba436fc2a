"""
Domain errors raised by services and translated to JSON responses in main.py.
Each error carries an HTTP status and a short machine-readable reason.
"""
from fastapi import status


class PortfolioError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "internal_error"

    def __init__(self, message: str = "", reason: str = None):
        super().__init__(message)
        self.message = message
        if reason:
            self.reason = reason


class ValidationError(PortfolioError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    reason = "validation_error"


class NotFoundError(PortfolioError):
    """Unknown record id."""

    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"


class AuthorizationError(PortfolioError):
    """Missing or invalid admin session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "unauthorized"


class UpstreamError(PortfolioError):
    """Database or object-store call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "upstream_error"
