"""
Authentication Utility - password hashing and the bearer-token gate.

Provides:
- Password hashing with bcrypt (passlib)
- FastAPI dependency that guards protected routes
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from app.core.exceptions import TokenError, Unauthenticated
from app.core.tokens import Principal

logger = logging.getLogger(__name__)

# Bearer token extractor; a missing header is reported by the gate itself
bearer_scheme = HTTPBearer(
    auto_error=False,
    description="JWT obtained from POST /api/auth/login",
)


class PasswordHasher:
    """One-way salted password digests."""

    def __init__(self, rounds: int = 12):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash password with bcrypt."""
        return self.context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash. An unreadable hash counts as a mismatch."""
        try:
            return self.context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.error("Password verification error: %s", e)
            return False

    def dummy_verify(self) -> None:
        """Burn one verification's worth of time (unknown usernames)."""
        self.context.dummy_verify()


def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    FastAPI dependency - Get the authenticated administrator.

    Usage:
        @router.get("/protected")
        def route(admin: Principal = Depends(get_current_admin)):
            return admin.subject
    """
    if credentials is None:
        raise Unauthenticated()

    token_service = request.app.state.container.token_service
    try:
        principal = token_service.verify(credentials.credentials)
    except TokenError as e:
        logger.warning("Rejected bearer token: %s", type(e).__name__)
        raise Unauthenticated() from e

    if not principal.is_admin:
        logger.warning("Token for %s carries role %s", principal.subject, principal.role)
        raise Unauthenticated()
    return principal
