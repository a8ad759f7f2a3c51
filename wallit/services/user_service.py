"""
Wallit Users — User Service (Business Logic)
=============================================

What:  Registration, credential verification and user lookups.
How:   Validates input, talks to the `users` table through the session it is
       given, and hashes/verifies passwords off the event loop.
Who:   Called by the /users route handlers.

Registration Flow (POST /users):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│  Duplicate  │───▶│  bcrypt hash │───▶│  Insert  │
    │  fields  │    │ email check │    │  (threadpool)│    │  (flush) │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    The duplicate check is a case-insensitive read before the write. The
    unique index on lower(users.email) catches registrations that interleave
    between the two, and the resulting IntegrityError is reported as the
    same 409.

Errors:
    Every method raises a WallitError subclass on the first violation.
    Unexpected SQLAlchemy errors are logged and re-raised as DatabaseError.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from email_validator import EmailNotValidError, validate_email as check_email_shape
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from wallit.config import settings
from wallit.exceptions import (
    BadRequestError,
    ConflictError,
    DatabaseError,
    UnauthorizedError,
)
from wallit.models.user import User
from wallit.schemas.user import UserResponse
from wallit.security import MAX_PASSWORD_BYTES, hash_password, verify_password
from wallit.validation import is_missing, validate_fields

logger = logging.getLogger(__name__)

# Field name → label used in "<label> cannot be undefined"
VALIDATION_RULES = {
    "id": "ID",
    "firstname": "Firstname",
    "lastname": "Lastname",
    "email": "Email",
    "password": "Password",
}

REGISTRATION_FIELDS = ["firstname", "lastname", "email", "password"]
CREDENTIAL_FIELDS = ["email", "password"]

INVALID_CREDENTIALS = "Invalid credentials"


def validate_user(user: Optional[Mapping[str, Any]], fields_to_validate: Sequence[str]) -> None:
    """
    Validate a user payload against the fixed rules mapping.

    Raises:
        BadRequestError: user is None, or a listed field is missing.
    """
    if user is None:
        raise BadRequestError("User cannot be undefined")
    validate_fields(user, VALIDATION_RULES, fields_to_validate)


class UserService:
    """
    Business logic layer for user accounts.

    Responsibilities:
        - create_user(): validate → reject duplicates → hash → insert
        - authenticate_user(): look up by email and verify the password
        - find_user_by_email(): public lookup, never loads the password column
        - get_user_by_id(): internal primary-key lookup

    Stateless apart from the bcrypt cost factor; sessions are passed per call.
    """

    def __init__(self, hash_rounds: int = 12):
        self.hash_rounds = hash_rounds

    async def create_user(self, db: AsyncSession, user: Optional[Mapping[str, Any]]) -> str:
        """
        Register a new user.

        Args:
            db: Async database session (injected by FastAPI)
            user: Mapping with firstname, lastname, email and password

        Returns:
            The new record's id as text.

        Raises:
            BadRequestError: A field is missing, the email is malformed, or the
                password is longer than bcrypt accepts
            ConflictError: The email is already registered
            DatabaseError: The insert failed for another reason
        """
        validate_user(user, REGISTRATION_FIELDS)

        email = user["email"]
        self._check_email_shape(email)

        password = user["password"]
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise BadRequestError(
                f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )

        await self.ensure_email_available(db, email)

        hashed = await run_in_threadpool(hash_password, password, self.hash_rounds)

        record = User(
            firstname=user["firstname"],
            lastname=user["lastname"],
            email=email,
            password=hashed,
        )
        try:
            db.add(record)
            await db.flush()
        except IntegrityError as e:
            # Lost the race against a concurrent registration for this email
            logger.info("Duplicate email rejected by unique index: %s", email)
            raise ConflictError(context={"email": email}) from e
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("User %s registered", record.id)
        return str(record.id)

    async def authenticate_user(
        self, db: AsyncSession, credentials: Optional[Mapping[str, Any]]
    ) -> UserResponse:
        """
        Verify an email/password pair.

        Unknown email and wrong password both raise UnauthorizedError with the
        message "Invalid credentials".

        Returns:
            The matching user without its password.
        """
        validate_user(credentials, CREDENTIAL_FIELDS)

        user = await self._get_by_email(db, credentials["email"])
        if user is None:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        is_valid = await run_in_threadpool(verify_password, credentials["password"], user.password)
        if not is_valid:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return UserResponse.model_validate(user)

    async def find_user_by_email(self, db: AsyncSession, email: Optional[str]) -> UserResponse:
        """
        Look up a user by email, selecting only id, firstname, lastname and email.

        Raises:
            BadRequestError: email is missing, or no user has it
        """
        if is_missing(email):
            raise BadRequestError("Invalid email", field="email")

        try:
            result = await db.execute(
                select(User.id, User.firstname, User.lastname, User.email)
                .where(func.lower(User.email) == email.lower())
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        if row is None:
            raise BadRequestError("Could not find a user with the given email")

        return UserResponse(id=row.id, firstname=row.firstname, lastname=row.lastname, email=row.email)

    async def get_user_by_id(self, db: AsyncSession, user_id: Optional[int]) -> User:
        """
        Load the full record for a primary key.

        Returns:
            The User ORM instance, password hash included. Not exposed by any route.
        """
        if is_missing(user_id):
            raise BadRequestError("User ID cannot be undefined", field="id")

        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            ) from e

        if user is None:
            raise BadRequestError(f"A user with the given ID {user_id} could not be found")
        return user

    async def ensure_email_available(self, db: AsyncSession, email: Optional[str]) -> None:
        """
        Raise ConflictError if `email` is already registered.

        Raises:
            BadRequestError: email is missing
            ConflictError: a record already uses the email
        """
        if is_missing(email):
            raise BadRequestError("Email cannot be undefined", field="email")
        if await self._get_by_email(db, email) is not None:
            raise ConflictError("This email is already taken.", context={"email": email})

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    @staticmethod
    def _check_email_shape(email: str) -> None:
        try:
            check_email_shape(email, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError as e:
            raise BadRequestError(
                "Email must be a valid email address",
                field="email",
                context={"reason": str(e)},
            ) from e


user_service = UserService(hash_rounds=settings.password_hash_rounds)
