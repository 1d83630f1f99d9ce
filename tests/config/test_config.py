"""Tests for loading configuration from the environment."""

import logging
from pathlib import Path

import pytest

from bookstore.config import AdminSeed, AppConfig, configure_logging, load_config_from_env
from bookstore.config.config import get_env_bool, get_env_int

SECRET = "a-configuration-secret-of-adequate-length"
CONFIG_VARS = (
    "DATABASE_PATH",
    "LOGGING_LEVEL",
    "ROOT_PATH",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "PASSWORD_MIN_LENGTH",
    "ORDER_STATUS_STRICT",
    "ADMIN_USERNAME",
    "ADMIN_EMAIL",
    "ADMIN_PASSWORD",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration variables, restoring them after the test."""
    for name in CONFIG_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", SECRET)

    config = load_config_from_env(None)

    assert config.database_path == "./bookstore.db"
    assert config.access_token_expire_minutes == 30 * 24 * 60
    assert config.password_min_length == 6  # noqa: PLR2004
    assert config.admin_seed is None
    assert config.cors_origins == ["*"]
    assert config.security_manager.secret_key == SECRET
    assert not config.status_machine.strict


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("DATABASE_PATH", "/tmp/shop.db")  # noqa: S108
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("PASSWORD_MIN_LENGTH", "10")
    monkeypatch.setenv("ORDER_STATUS_STRICT", "yes")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("ADMIN_USERNAME", "root")
    monkeypatch.setenv("ADMIN_EMAIL", "root@example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "root-password")

    config = load_config_from_env(None)

    assert config.database_path == "/tmp/shop.db"  # noqa: S108
    assert config.security_manager.expire_minutes == 15  # noqa: PLR2004
    assert config.security_manager.password_min_length == 10  # noqa: PLR2004
    assert config.status_machine.strict
    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.admin_seed == AdminSeed("root", "root@example.com", "root-password")


def test_env_file_is_loaded(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(f"JWT_SECRET={SECRET}\nROOT_PATH=/api\n")

    config = load_config_from_env(env_file)

    assert config.jwt_secret == SECRET
    assert config.root_path == "/api"


def test_jwt_secret_is_required(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ValueError, match="JWT_SECRET is required"):
        load_config_from_env(None)

    monkeypatch.setenv("JWT_SECRET", "too-short")
    with pytest.raises(ValueError, match="JWT_SECRET has invalid value"):
        load_config_from_env(None)


def test_partial_admin_seed_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("ADMIN_USERNAME", "root")

    with pytest.raises(ValueError, match="ADMIN_EMAIL, ADMIN_PASSWORD"):
        load_config_from_env(None)


def test_unsupported_algorithm(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("JWT_ALGORITHM", "none")

    with pytest.raises(ValueError, match="JWT_ALGORITHM"):
        load_config_from_env(None)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), ("on", True), ("0", False), ("no", False)],
)
def test_get_env_bool(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected: bool,  # noqa: FBT001
) -> None:
    monkeypatch.setenv("SOME_FLAG", raw)

    assert get_env_bool("SOME_FLAG", default=not expected) is expected


def test_get_env_bool_rejects_other_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOME_FLAG", "maybe")

    with pytest.raises(ValueError, match="must be a boolean"):
        get_env_bool("SOME_FLAG", default=False)


def test_get_env_int(monkeypatch: pytest.MonkeyPatch) -> None:
    assert get_env_int("SOME_NUMBER", 7) == 7  # noqa: PLR2004

    monkeypatch.setenv("SOME_NUMBER", "seven")
    with pytest.raises(ValueError, match="must be an integer"):
        get_env_int("SOME_NUMBER", 7)

    monkeypatch.setenv("SOME_NUMBER", "0")
    with pytest.raises(ValueError, match="invalid value"):
        get_env_int("SOME_NUMBER", 7, lambda value: value > 0)


def test_configure_logging_falls_back_to_info() -> None:
    config = AppConfig(database_path=":memory:", jwt_secret=SECRET, logging_level="LOUD")

    configure_logging(config)

    assert logging.getLogger().level == logging.INFO
