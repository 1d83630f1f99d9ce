"""Settings for the bookstore API.

Everything is read from process environment variables, optionally seeded
from a ``.env`` file, and collected into one :class:`AppConfig`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bookstore.auth import SecurityManager
from bookstore.orders import OrderStatusMachine

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})
_ADMIN_VARS = ("ADMIN_USERNAME", "ADMIN_EMAIL", "ADMIN_PASSWORD")


def configure_logging(app_config: AppConfig) -> None:
    """Set up root logging at the configured level.

    Unknown level names fall back to INFO with a warning.
    """
    level_name = (app_config.logging_level or "INFO").upper()
    level = logging.getLevelNamesMapping().get(level_name)
    logging.basicConfig(level=level or logging.INFO, format=LOG_FORMAT, force=True)
    if level is None:
        LOGGER.warning("Unknown LOGGING_LEVEL %r, logging at INFO", level_name)


@dataclass
class AdminSeed:
    """Credentials for the admin account created on first start."""

    username: str
    email: str
    password: str


@dataclass
class AppConfig:
    """Runtime settings plus the services derived from them.

    ``security_manager`` and ``status_machine`` are built from the plain
    fields once the instance is created.
    """

    database_path: str
    jwt_secret: str
    logging_level: str | None = "INFO"
    root_path: str = ""
    jwt_algorithm: str = SecurityManager.DEFAULT_JWT_ALGORITHM
    access_token_expire_minutes: int = SecurityManager.DEFAULT_TOKEN_EXPIRE_MINUTES
    password_min_length: int = SecurityManager.DEFAULT_PASSWORD_MIN_LENGTH
    order_status_strict: bool = False
    admin_seed: AdminSeed | None = None
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def __post_init__(self) -> None:
        self.security_manager = SecurityManager(
            secret_key=self.jwt_secret,
            algorithm=self.jwt_algorithm,
            expire_minutes=self.access_token_expire_minutes,
            password_min_length=self.password_min_length,
        )
        self.status_machine = OrderStatusMachine(strict=self.order_status_strict)


def get_env_str(
    var_name: str,
    default: str | None,
    value_checker: Callable[[str], bool] | None = None,
) -> str:
    """Read a string setting.

    :param var_name: Environment variable to read
    :param default: Fallback when unset; None makes the variable mandatory
    :param value_checker: Predicate the value has to satisfy
    :raises ValueError: If the variable is missing or fails the check
    """
    value = os.environ.get(var_name, default)
    if value is None:
        msg = f"Environment variable {var_name} is required"
        raise ValueError(msg)

    if value_checker is not None and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value"
        raise ValueError(msg)
    return value


def get_env_int(
    var_name: str,
    default: int,
    value_checker: Callable[[int], bool] | None = None,
) -> int:
    """Read a non-negative integer setting; empty counts as unset.

    :raises ValueError: If the value is not a number or fails the check
    """
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default

    if not raw.isdigit():
        msg = f"Environment variable {var_name} must be an integer, got: {raw}"
        raise ValueError(msg)

    value = int(raw)
    if value_checker is not None and not value_checker(value):
        msg = f"Environment variable {var_name} has invalid value: {value}"
        raise ValueError(msg)
    return value


def get_env_bool(var_name: str, *, default: bool) -> bool:
    """Read a yes/no setting such as ``1``, ``true``, ``off`` or ``no``.

    :raises ValueError: If the value is not a recognised boolean
    """
    raw = os.environ.get(var_name)
    if raw is None:
        return default

    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False

    msg = f"Environment variable {var_name} must be a boolean, got: {raw}"
    raise ValueError(msg)


def get_admin_seed() -> AdminSeed | None:
    """Read the optional admin account credentials.

    :raises ValueError: If only some of the admin variables are set
    """
    values = {name: os.environ.get(name) for name in _ADMIN_VARS}
    if not any(values.values()):
        return None

    missing = [name for name, value in values.items() if not value]
    if missing:
        msg = f"Environment variables {', '.join(missing)} are required to seed an admin"
        raise ValueError(msg)

    username, email, password = (values[name] or "" for name in _ADMIN_VARS)
    return AdminSeed(username=username, email=email, password=password)


def get_cors_origins() -> list[str]:
    """Read ``CORS_ORIGINS`` as a comma separated list."""
    origins = get_env_str("CORS_ORIGINS", "*").split(",")
    return [origin.strip() for origin in origins if origin.strip()]


def load_config_from_env(env_file: str | Path | None) -> AppConfig:
    """Build the application settings from the environment.

    :param env_file: ``.env`` file to load first; variables already set in
        the process take precedence over it
    """
    if env_file:
        load_dotenv(dotenv_path=env_file)

    return AppConfig(
        database_path=get_env_str("DATABASE_PATH", "./bookstore.db"),
        jwt_secret=get_env_str(
            "JWT_SECRET",
            None,
            lambda secret: len(secret) >= SecurityManager.MINIMUM_JWT_SECRET_KEY_LENGTH,
        ),
        logging_level=get_env_str("LOGGING_LEVEL", "INFO"),
        root_path=get_env_str("ROOT_PATH", ""),
        jwt_algorithm=get_env_str(
            "JWT_ALGORITHM",
            SecurityManager.DEFAULT_JWT_ALGORITHM,
            _HMAC_ALGORITHMS.__contains__,
        ),
        access_token_expire_minutes=get_env_int(
            "ACCESS_TOKEN_EXPIRE_MINUTES",
            SecurityManager.DEFAULT_TOKEN_EXPIRE_MINUTES,
            lambda expiry: expiry > 0,
        ),
        password_min_length=get_env_int(
            "PASSWORD_MIN_LENGTH",
            SecurityManager.DEFAULT_PASSWORD_MIN_LENGTH,
            lambda minimum: minimum > 0,
        ),
        order_status_strict=get_env_bool("ORDER_STATUS_STRICT", default=False),
        admin_seed=get_admin_seed(),
        cors_origins=get_cors_origins(),
    )
