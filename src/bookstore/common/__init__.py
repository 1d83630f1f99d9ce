"""Common data models and errors for the application."""

from .errors import (
    BookstoreError,
    Conflict,
    Forbidden,
    InternalFailure,
    NotFound,
    TokenRejected,
    Unauthorized,
    ValidationFailure,
)
from .user import Role, SessionClaim

__all__ = [
    "BookstoreError",
    "Conflict",
    "Forbidden",
    "InternalFailure",
    "NotFound",
    "Role",
    "SessionClaim",
    "TokenRejected",
    "Unauthorized",
    "ValidationFailure",
]
