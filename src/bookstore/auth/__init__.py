"""All authentication-related modules and routes."""

from .auth_routes import configure_auth_router
from .queries import AccountQueries
from .security_manager import (
    SecurityManager,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
)
from .validation import Validate

__all__ = [
    "AccountQueries",
    "SecurityManager",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "Validate",
    "configure_auth_router",
]
