"""Shared fixtures: a temporary document store, catalog and API client."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from bookstore.app import configure_fastapi_app
from bookstore.auth import SecurityManager
from bookstore.catalog import BookQueries
from bookstore.config import AdminSeed, AppConfig
from bookstore.store import DocumentStore

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
TEST_ADMIN = AdminSeed(
    username="admin",
    email="admin@example.com",
    password="admin-password",
)


@pytest.fixture
def book_body() -> dict:
    """Return a valid book body."""
    return {
        "url": "https://example.com/covers/dune.jpg",
        "title": "Dune",
        "author": "Frank Herbert",
        "price": 12.5,
        "desc": "A desert planet, a noble family and a spice.",
        "language": "English",
    }


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> AsyncGenerator[DocumentStore]:
    """Create a document store backed by a temporary SQLite file."""
    async with DocumentStore.open(str(tmp_path / "test.db")) as document_store:
        yield document_store


@pytest.fixture
def book_queries(store: DocumentStore) -> BookQueries:
    return BookQueries(store)


@pytest_asyncio.fixture
async def user_id(store: DocumentStore) -> str:
    """Insert a bare account document and return its identifier."""
    return await store.insert_one(
        "users",
        {
            "username": "reader",
            "email": "reader@example.com",
            "role": "user",
            "favourites": [],
            "cart": [],
            "orders": [],
        },
    )


@pytest.fixture
def security_manager() -> SecurityManager:
    return SecurityManager(secret_key=TEST_SECRET)


@pytest.fixture
def admin_seed() -> AdminSeed:
    return TEST_ADMIN


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        database_path=str(tmp_path / "api.db"),
        jwt_secret=TEST_SECRET,
        admin_seed=TEST_ADMIN,
    )


@pytest.fixture
def client(app_config: AppConfig) -> Generator[TestClient]:
    """Create an API client; entering it runs the application lifespan."""
    with TestClient(configure_fastapi_app(app_config)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    """Sign in as the seeded admin and return the authorization header."""
    response = client.post(
        "/sign-in",
        json={"username": TEST_ADMIN.username, "password": TEST_ADMIN.password},
    )
    assert response.status_code == 200  # noqa: PLR2004
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def reader_headers(client: TestClient) -> dict[str, str]:
    """Register a regular account, sign in and return the authorization header."""
    client.post(
        "/sign-up",
        json={
            "username": "reader",
            "email": "reader@example.com",
            "password": "reader-password",
            "address": "1 Library Lane",
        },
    )
    response = client.post(
        "/sign-in",
        json={"username": "reader", "password": "reader-password"},
    )
    assert response.status_code == 200  # noqa: PLR2004
    return {"Authorization": f"Bearer {response.json()['token']}"}
