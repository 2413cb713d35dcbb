"""
Token Service - issues and verifies signed, time-limited bearer tokens (JWT).

Tokens are stateless: validity depends only on the signature and the
embedded expiry at verification time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.exceptions import ExpiredToken, InvalidToken, MalformedToken

ADMIN_ROLE = "ADMIN"


@dataclass(frozen=True)
class Principal:
    """Identity attached to an authenticated request."""

    subject: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class TokenService:
    """Signs and verifies JWT access tokens with a shared secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_delta = timedelta(minutes=expire_minutes)

    def issue(self, subject: str, role: str = ADMIN_ROLE) -> str:
        """Create a token for `subject` expiring after the configured horizon."""
        issued_at = datetime.now(timezone.utc)
        claims = {
            "sub": subject,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + self.expire_delta,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        """
        Verify a token and return the identity it carries.

        Raises:
            MalformedToken: token is not a parseable JWT
            InvalidToken: signature mismatch or required claims missing
            ExpiredToken: signature is fine but the expiry has passed
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedToken() from e

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise ExpiredToken() from e
        except JWTError as e:
            raise InvalidToken() from e

        subject = payload.get("sub")
        role = payload.get("role")
        if not subject or not role:
            raise InvalidToken("Token is missing required claims")
        return Principal(subject=subject, role=role)
