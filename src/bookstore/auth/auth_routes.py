"""Account routes for the FastAPI application.

Provides endpoints for sign-up, sign-in and the caller's own profile.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from bookstore.common import NotFound, Role, SessionClaim, ValidationFailure
from bookstore.store import Document

from .models import (
    AddressUpdate,
    InsertedId,
    MessageResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    UserProfile,
    UserProfileResponse,
)
from .queries import AccountQueries
from .validation import Validate

LOGGER = logging.getLogger(__name__)


async def _sign_up(
    account_queries: AccountQueries,
    form: SignUpRequest,
) -> SignUpResponse:
    user_id = await account_queries.create_account(
        username=form.username,
        email=str(form.email),
        password=form.password,
        address=form.address,
        avatar=form.avatar,
    )
    return SignUpResponse(data=InsertedId(inserted_id=user_id))


async def _sign_in(
    account_queries: AccountQueries,
    form: SignInRequest,
) -> SignInResponse:
    user = await account_queries.authenticate_user(form.username, form.password)

    if not user:
        LOGGER.debug("Failed sign-in attempt for username: %s", form.username)
        msg = "Invalid credentials"
        raise ValidationFailure(msg)

    role = Role(user["role"])
    token = account_queries.security_manager.create_access_token(
        SessionClaim(username=user["username"], role=role),
    )
    LOGGER.debug("User %s signed in successfully", form.username)
    return SignInResponse(id=user["_id"], role=role, token=token)


async def _update_address(
    account_queries: AccountQueries,
    user: Document,
    update: AddressUpdate,
) -> MessageResponse:
    result = await account_queries.update_address(user["_id"], update.address)
    if result.modified_count == 0:
        msg = "User not found or address unchanged"
        raise NotFound(msg)
    LOGGER.debug("Address updated for user: %s", user["username"])
    return MessageResponse(message="Address updated successfully")


def configure_auth_router(
    router: APIRouter,
    validate: Validate,
) -> APIRouter:
    """Configure the account router.

    :param router: The APIRouter to configure
    :param validate: The Validate instance for authentication and authorization
    :return: The configured APIRouter
    """
    account_queries = validate.account_queries

    @router.post(
        "/sign-up",
        response_model=SignUpResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def sign_up(form: SignUpRequest) -> SignUpResponse:
        return await _sign_up(account_queries, form)

    @router.post("/sign-in", response_model=SignInResponse)
    async def sign_in(form: SignInRequest) -> SignInResponse:
        return await _sign_in(account_queries, form)

    @router.get("/get-user-information", response_model=UserProfileResponse)
    def get_user_information(
        user: Annotated[Document, Depends(validate.identity)],
    ) -> UserProfileResponse:
        return UserProfileResponse(data=UserProfile.model_validate(user))

    @router.put("/update-address", response_model=MessageResponse)
    async def update_address(
        update: AddressUpdate,
        user: Annotated[Document, Depends(validate.identity)],
    ) -> MessageResponse:
        return await _update_address(account_queries, user, update)

    return router
