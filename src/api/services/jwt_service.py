"""Access tokens and demo-account authentication.

Tokens are signed JWTs carrying the username as subject and the
role granted at login. Upload endpoints require the STORE_MANAGER
role; catalog reads accept any valid token.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt

from src.settings import settings

REQUIRED_CLAIMS = ["sub", "exp", "iat"]


class Role(str, Enum):
    """Role claim values."""

    STORE_MANAGER = "STORE_MANAGER"
    USER = "USER"


@dataclass(frozen=True)
class TokenPayload:
    """Claims of a verified token.

    Attributes:
        sub: Username.
        role: Role granted at login.
        exp: Expiry.
        iat: Issue time.
    """

    sub: str
    role: Role
    exp: datetime
    iat: datetime

    @property
    def is_store_manager(self) -> bool:
        return self.role is Role.STORE_MANAGER


# =============================================================================
# ERRORS
# =============================================================================


class TokenError(Exception):
    """Token could not be accepted."""


class TokenExpiredError(TokenError):
    """Signature valid but the token is past its expiry."""


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or unexpected claims."""


# =============================================================================
# JWT SERVICE
# =============================================================================


class JWTService:
    """Issues and verifies access tokens.

    Signing parameters default to the security settings.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ) -> None:
        security = settings.security
        self._secret_key = secret_key or security.jwt_secret_key
        self._algorithm = algorithm or security.jwt_algorithm
        self._expire_minutes = expire_minutes if expire_minutes is not None else security.jwt_expire_minutes

    @property
    def expire_seconds(self) -> int:
        """Token lifetime in seconds."""
        return self._expire_minutes * 60

    def create_token(self, subject: str, role: Role = Role.USER) -> str:
        """Sign a token for a user.

        Args:
            subject: Username.
            role: Role claim.

        Returns:
            Encoded JWT.
        """
        issued_at = datetime.now(UTC)
        claims = {
            "sub": subject,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenPayload:
        """Verify a token and return its claims.

        Tokens without a role claim are treated as USER tokens.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token fails any other check.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        return _to_payload(claims)


def _to_payload(claims: dict[str, Any]) -> TokenPayload:
    """Build a TokenPayload from verified claims.

    Raises:
        InvalidTokenError: If the role claim is unknown.
    """
    try:
        role = Role(claims.get("role", Role.USER.value))
    except ValueError as e:
        raise InvalidTokenError(f"Unknown role {claims.get('role')!r}") from e
    return TokenPayload(
        sub=str(claims["sub"]),
        role=role,
        exp=datetime.fromtimestamp(claims["exp"], tz=UTC),
        iat=datetime.fromtimestamp(claims["iat"], tz=UTC),
    )


# =============================================================================
# DEMO ACCOUNTS
# =============================================================================


def role_for(username: str) -> Role:
    """Role granted to a user at login."""
    if username in settings.security.store_managers:
        return Role.STORE_MANAGER
    return Role.USER


def authenticate(username: str, password: str) -> Role | None:
    """Check demo-account credentials.

    Args:
        username: Submitted username.
        password: Submitted password.

    Returns:
        Role of the account, or None if the credentials are wrong.
    """
    expected = settings.security.demo_users.get(username)
    if expected is None or expected != password:
        return None
    return role_for(username)


def get_jwt_service() -> JWTService:
    """FastAPI dependency returning a service built from settings."""
    return JWTService()
