"""Credentials and session tokens.

Passwords are checked against a minimum length and stored as bcrypt hashes;
sessions are HMAC-signed JWT access tokens naming a username and role.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from bcrypt import checkpw, gensalt, hashpw

from bookstore.common import Role, SessionClaim

LOGGER = logging.getLogger(__name__)


class TokenError(Exception):
    """Base class for access tokens that cannot be accepted."""


class TokenExpiredError(TokenError):
    """Raised for a well-formed, correctly signed token past its expiry."""


class TokenInvalidError(TokenError):
    """Raised for malformed tokens, bad signatures or missing claims."""


@dataclass
class SecurityManager:
    """Signs and checks tokens and hashes passwords with one set of settings.

    :param str secret_key: Secret key for JWT signing, supplied by configuration
    :param str algorithm: JWT signing algorithm
    :param int expire_minutes: Token expiration time in minutes
    :param int password_min_length: Minimum length for passwords
    """

    DEFAULT_JWT_ALGORITHM = "HS256"
    DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30
    DEFAULT_PASSWORD_MIN_LENGTH = 6
    MINIMUM_JWT_SECRET_KEY_LENGTH = 32
    ACCESS_TOKEN_TYPE = "access_token"

    secret_key: str
    algorithm: str = DEFAULT_JWT_ALGORITHM
    expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH

    def __post_init__(self) -> None:
        """Reject secrets too short to sign tokens safely."""
        if len(self.secret_key) < self.MINIMUM_JWT_SECRET_KEY_LENGTH:
            msg = (
                "JWT secret key must be at least "
                f"{self.MINIMUM_JWT_SECRET_KEY_LENGTH} characters long"
            )
            raise ValueError(msg)

    def validate_password(self, password: str) -> str | None:
        """Return why ``password`` is unacceptable, or None if it is fine."""
        if len(password) >= self.password_min_length:
            return None

        return f"Password must be at least {self.password_min_length} characters"

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password with a fresh bcrypt salt."""
        return hashpw(password.encode(), gensalt()).decode()

    @staticmethod
    def check_password(password: str, hashed_password: str) -> bool:
        """Check a plaintext password against a stored bcrypt hash."""
        return checkpw(password.encode(), hashed_password.encode())

    def create_access_token(
        self,
        claim: SessionClaim,
        now: datetime | None = None,
    ) -> str:
        """Create a new JWT access token carrying the claim.

        :param SessionClaim claim: Username and role to embed in the token
        :param now: Issue time, defaults to the current time
        :return: A JWT access token as a string
        """
        issued_at = now or datetime.now(UTC)
        expire = issued_at + timedelta(minutes=self.expire_minutes)

        payload = {
            "sub": claim.username,
            "role": str(claim.role),
            "exp": expire,
            "iat": issued_at,
            "type": self.ACCESS_TOKEN_TYPE,
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str, now: datetime | None = None) -> SessionClaim:
        """Verify and decode a JWT token, returning its claim.

        :param token: The JWT token string to verify
        :param now: Time to check expiry against, defaults to the current time
        :return: The decoded session claim
        :raises TokenExpiredError: If the token is valid but has expired
        :raises TokenInvalidError: If the token is malformed or tampered with
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"], "verify_exp": now is None},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(str(e)) from e

        if now is not None and payload["exp"] <= now.timestamp():
            msg = "Signature has expired"
            raise TokenExpiredError(msg)

        if payload.get("type") != self.ACCESS_TOKEN_TYPE:
            msg = "Invalid token type"
            raise TokenInvalidError(msg)

        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            msg = "Token carries an unknown role"
            raise TokenInvalidError(msg) from e

        return SessionClaim(username=payload["sub"], role=role)
