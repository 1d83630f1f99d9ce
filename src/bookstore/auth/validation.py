"""FastAPI dependency validators for authentication and authorization."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.common import (
    Forbidden,
    NotFound,
    Role,
    SessionClaim,
    TokenRejected,
    Unauthorized,
)
from bookstore.store import Document

from .queries import AccountQueries
from .security_manager import TokenError

# missing credentials are reported by jwt_token, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)

LOGGER = logging.getLogger(__name__)


class Validate:
    """Holds validator dependencies for FastAPI authentication/authorization."""

    def __init__(self, account_queries: AccountQueries) -> None:
        """Create a new validator instance.

        :param account_queries: Account repository, also providing the
            security manager used to verify tokens
        """
        self.account_queries = account_queries
        self.security_manager = account_queries.security_manager

    def jwt_token(
        self,
        credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
    ) -> SessionClaim:
        """Validate the bearer access token and return its claim."""
        if credentials is None:
            LOGGER.debug("Request rejected: no bearer token")
            msg = "Authentication token required"
            raise Unauthorized(msg)

        try:
            claim = self.security_manager.verify_token(credentials.credentials)
        except TokenError as e:
            LOGGER.debug("JWT token validation failed: %s", e)
            msg = "Token expired. Please sign in again"
            raise TokenRejected(msg) from e

        LOGGER.debug("JWT token validated for user: %s", claim.username)
        return claim

    async def identity(
        self,
        credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
    ) -> Document:
        """Resolve the acting account from the verified token claim."""
        claim = self.jwt_token(credentials)
        user = await self.account_queries.get_by_username(claim.username)
        if user is None:
            LOGGER.debug("Token for unknown user: %s", claim.username)
            msg = "User not found"
            raise NotFound(msg)
        return user

    def role(self, required_role: Role) -> Callable[..., Awaitable[Document]]:
        """Return a role-based dependency validator.

        The role is read from the stored account rather than the token, so a
        demotion takes effect on the next request.
        """

        async def validator(user: Document = Depends(self.identity)) -> Document:  # noqa: B008
            if not Role(user["role"]).check_permission(required_role):
                LOGGER.debug("Role validation failed for user: %s", user["username"])
                msg = f"Only {required_role} can perform this action"
                raise Forbidden(msg)
            LOGGER.debug("Role validated for user: %s", user["username"])
            return user

        return validator
