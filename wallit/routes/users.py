"""
Wallit Users — User Route Handlers
===================================

What:  POST /users, POST /users/authenticate and GET /users?email=...
How:   Parse the request, delegate to UserService, shape the response.
       Errors raised by the service are turned into responses by the global
       WallitError handler in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from wallit.database import get_db_session
from wallit.schemas.user import UserCreate, UserCredentials, UserResponse
from wallit.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

_ERROR_RESPONSES = {
    400: {"description": "Missing or invalid input", "content": {"text/plain": {}}},
    500: {"description": "Server error", "content": {"text/plain": {}}},
}


@router.post(
    "",
    status_code=201,
    response_class=PlainTextResponse,
    responses={
        201: {"description": "New user id as plain text"},
        409: {"description": "Email already registered", "content": {"text/plain": {}}},
        **_ERROR_RESPONSES,
    },
    summary="Register a user",
)
async def create_user(
    payload: Optional[UserCreate] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> PlainTextResponse:
    """
    Register a new user and return its id.

    The password is hashed with bcrypt before it is stored.
    """
    user = payload.model_dump(exclude_unset=True) if payload is not None else None
    user_id = await user_service.create_user(db, user)
    return PlainTextResponse(user_id, status_code=201)


@router.post(
    "/authenticate",
    response_model=UserResponse,
    responses={
        401: {"description": "Invalid credentials", "content": {"text/plain": {}}},
        **_ERROR_RESPONSES,
    },
    summary="Verify email and password",
)
async def authenticate_user(
    payload: Optional[UserCredentials] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """Return the user for a matching email/password pair, without the password."""
    credentials = payload.model_dump(exclude_unset=True) if payload is not None else None
    return await user_service.authenticate_user(db, credentials)


@router.get(
    "",
    response_model=UserResponse,
    responses=_ERROR_RESPONSES,
    summary="Find a user by email",
)
async def find_user_by_email(
    email: Optional[str] = Query(default=None, description="Email address to look up"),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """Return id, firstname, lastname and email for the given address."""
    return await user_service.find_user_by_email(db, email)
