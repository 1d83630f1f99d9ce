"""Account queries.

Using the AccountQueries class as a repository for identity documents:
sign-up, credential checks, profile fields and the seeded admin account.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bookstore.common import Conflict, Role, ValidationFailure
from bookstore.store import utc_now

if TYPE_CHECKING:
    from bookstore.store import Document, DocumentStore, UpdateResult

    from .security_manager import SecurityManager

LOGGER = logging.getLogger(__name__)

USERS = "users"
DEFAULT_AVATAR = "https://cdn-icons-png.flaticon.com/128/3177/3177440.png"
PRIVATE_FIELDS = ("password",)


class AccountQueries:
    """Repository for account-related queries."""

    def __init__(
        self,
        store: DocumentStore,
        security_manager: SecurityManager,
    ) -> None:
        """Create an AccountQueries instance.

        :param store: Document store holding the users collection
        :param security_manager: Security configuration manager
        """
        self.store = store
        self.security_manager = security_manager

    async def create_account(  # noqa: PLR0913
        self,
        username: str,
        email: str,
        password: str,
        address: str,
        avatar: str | None = None,
        role: Role = Role.USER,
    ) -> str:
        """Create a new account.

        :param username: Unique username
        :param email: Unique email address
        :param password: Plaintext password, stored as a bcrypt hash
        :param address: Delivery address
        :param avatar: Optional avatar URL
        :param role: Account role, ``user`` unless seeding an admin
        :return: The new account identifier
        :raises ValidationFailure: If the password does not meet requirements
        :raises Conflict: If the username or email is already registered
        """
        error = self.security_manager.validate_password(password)
        if error:
            msg = "Validation failed"
            raise ValidationFailure(msg, [error])

        if await self.store.count(USERS, {"username": username}):
            msg = "Username already exists"
            raise Conflict(msg)

        if await self.store.count(USERS, {"email": email}):
            msg = "Email already exists"
            raise Conflict(msg)

        now = utc_now()
        user_id = await self.store.insert_one(
            USERS,
            {
                "username": username,
                "email": email,
                "password": self.security_manager.hash_password(password),
                "address": address,
                "avatar": avatar or DEFAULT_AVATAR,
                "role": str(role),
                "favourites": [],
                "cart": [],
                "orders": [],
                "createdAt": now,
                "updatedAt": now,
            },
        )
        LOGGER.info("Created %s account %s", role, username)
        return user_id

    async def authenticate_user(self, username: str, password: str) -> Document | None:
        """Check credentials and return the account on success.

        :param username: The username of the account
        :param password: The plaintext password to verify
        :return: The account document if authentication succeeds, None otherwise
        """
        users = await self.store.find(USERS, {"username": username}, limit=1)
        if not users:
            return None

        user = users[0]
        if not self.security_manager.check_password(password, user["password"]):
            return None
        return user

    async def get_by_username(self, username: str) -> Document | None:
        """Return the account with ``username``, without private fields."""
        users = await self.store.find(USERS, {"username": username}, limit=1)
        if not users:
            return None
        return _public(users[0])

    async def get_by_id(self, user_id: str) -> Document | None:
        """Return the account with ``user_id``, without private fields."""
        return await self.store.find_one(USERS, user_id, exclude=PRIVATE_FIELDS)

    async def update_address(self, user_id: str, address: str) -> UpdateResult:
        """Set the delivery address of an account."""
        return await self.store.set_fields(
            USERS,
            user_id,
            {"address": address, "updatedAt": utc_now()},
        )

    async def ensure_admin(self, username: str, email: str, password: str) -> None:
        """Seed an admin account if the database has none.

        An existing account with the same username is promoted instead.
        """
        if await self.store.count(USERS, {"role": str(Role.ADMIN)}):
            return

        existing = await self.get_by_username(username)
        if existing is not None:
            await self.store.set_fields(
                USERS,
                existing["_id"],
                {"role": str(Role.ADMIN), "updatedAt": utc_now()},
            )
            LOGGER.info("No admin found; promoted account '%s' to admin", username)
            return

        await self.create_account(username, email, password, "", role=Role.ADMIN)
        LOGGER.info("No admin found; created admin account '%s'", username)


def _public(user: Document) -> Document:
    return {key: value for key, value in user.items() if key not in PRIVATE_FIELDS}
