"""FastAPI application factory for the bookstore API."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookstore.auth import AccountQueries, Validate, configure_auth_router
from bookstore.cart import configure_cart_router, cart_store, favourites_store
from bookstore.catalog import BookQueries, configure_catalog_router
from bookstore.common import BookstoreError, Unauthorized, ValidationFailure
from bookstore.config import configure_logging, load_config_from_env
from bookstore.orders import OrderWorkflow, configure_order_router
from bookstore.store import DocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from bookstore.config import AppConfig

LOGGER = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = {"success": False, "message": "Internal Server Error"}


async def _handle_bookstore_error(_request: Request, exc: Exception) -> JSONResponse:
    if (
        not isinstance(exc, BookstoreError)
        or exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        LOGGER.error("Request failed", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )

    content: dict[str, Any] = {"success": False, "message": exc.message}
    if isinstance(exc, ValidationFailure) and exc.errors:
        content["errors"] = exc.errors

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def _handle_request_validation(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    errors = []
    if isinstance(exc, RequestValidationError):
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"] if part != "body")
            errors.append(f"{location}: {error['msg']}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


async def _handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error("Unhandled error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )


def configure_fastapi_app(config: AppConfig) -> FastAPI:
    """Build the API around ``config``.

    The document store is opened, and the routers wired to it, when the
    application starts; nothing touches the database before that.

    :param config: Application settings
    :return: The application, ready to hand to an ASGI server
    """
    database_dir = Path(config.database_path).parent
    if not database_dir.is_dir():
        database_dir.mkdir(parents=True, exist_ok=True)
        LOGGER.info("Created database directory %s", database_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        LOGGER.info("Bookstore API is starting")

        async with DocumentStore.open(config.database_path) as store:
            account_queries = AccountQueries(store, config.security_manager)
            if config.admin_seed is not None:
                await account_queries.ensure_admin(
                    config.admin_seed.username,
                    config.admin_seed.email,
                    config.admin_seed.password,
                )

            book_queries = BookQueries(store)
            validate = Validate(account_queries)
            workflow = OrderWorkflow(store, book_queries, config.status_machine)

            app.include_router(
                configure_auth_router(APIRouter(), validate),
                tags=["account"],
            )
            app.include_router(
                configure_catalog_router(APIRouter(), book_queries, validate),
                tags=["catalog"],
            )
            app.include_router(
                configure_cart_router(
                    APIRouter(),
                    cart_store(store, book_queries),
                    favourites_store(store, book_queries),
                    validate,
                ),
                tags=["cart"],
            )
            app.include_router(
                configure_order_router(APIRouter(), workflow, validate),
                tags=["orders"],
            )

            yield

            LOGGER.info("Bookstore API is shutting down")

    app = FastAPI(
        title="Bookstore API",
        version="0.1.0",
        lifespan=lifespan,
        root_path=config.root_path,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BookstoreError, _handle_bookstore_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    @app.get("/")
    def read_root() -> str:
        return "Bookstore API"

    return app


def create_app(env_file: str | None = None) -> FastAPI:
    """Load settings from the environment and build the API.

    Suitable as a uvicorn factory (``uvicorn bookstore:create_app --factory``);
    the ``.env`` file then comes from ``ENV_FILE``, defaulting to ``.env``.

    :param env_file: ``.env`` file to read settings from
    """
    settings = load_config_from_env(env_file or os.environ.get("ENV_FILE", ".env"))
    configure_logging(settings)
    return configure_fastapi_app(settings)
