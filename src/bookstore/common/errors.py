"""Error taxonomy shared by every area of the API.

Each error carries the HTTP status it maps to; the application registers a
single handler for :class:`BookstoreError` that turns them into responses.
"""

from http import HTTPStatus


class BookstoreError(Exception):
    """Base class for errors that are reported back to the caller."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailure(BookstoreError):
    """Raised when input does not match the declared schema."""

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotFound(BookstoreError):
    """Raised when a referenced account, book or order does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class Unauthorized(BookstoreError):
    """Raised when no access token accompanies a protected request."""

    status_code = HTTPStatus.UNAUTHORIZED


class TokenRejected(BookstoreError):
    """Raised when the access token is invalid or expired."""

    status_code = HTTPStatus.FORBIDDEN


class Forbidden(BookstoreError):
    """Raised when the caller's role does not allow the operation."""

    status_code = HTTPStatus.FORBIDDEN


class Conflict(BookstoreError):
    """Raised when a unique account field is already taken."""

    status_code = HTTPStatus.BAD_REQUEST


class InternalFailure(BookstoreError):
    """Raised for unexpected persistence or runtime faults."""
