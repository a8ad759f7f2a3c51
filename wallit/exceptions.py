"""
Wallit Users — Error Hierarchy
===============================

What:  Tagged application errors carrying an HTTP-style status code and a
       client-safe message.
How:   Services raise these; the global handler registered in main.py turns
       any WallitError into `status(code)` with the message as plain text.

Exception Hierarchy:
    WallitError (base)          → code 500 unless told otherwise
    ├── BadRequestError         → 400 missing/invalid input, not-found lookups
    ├── UnauthorizedError       → 401 failed authentication
    ├── ConflictError           → 409 duplicate email
    └── DatabaseError           → 500 storage failure (generic message)

`make_error(code, message)` builds the most specific class for a code, so
call sites can write `raise make_error(409, "...")` without picking a class.
"""

from typing import Any, Dict, Optional

DEFAULT_CODE = 500
DEFAULT_MESSAGE = "Oops! something went wrong."


class WallitError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        code:     HTTP status code sent to the client
        message:  Client-facing error description
        context:  Extra debug info (logged, never returned to the client)
    """

    default_code = DEFAULT_CODE

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or DEFAULT_MESSAGE
        self.code = code or self.default_code
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class BadRequestError(WallitError):
    """Client input is missing or invalid, or a lookup found nothing."""

    default_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(WallitError):
    """
    Credentials did not match.

    Unknown email and wrong password raise this with the same message so the
    response does not reveal which check failed.
    """

    default_code = 401

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConflictError(WallitError):
    """A record with the same unique value already exists."""

    default_code = 409

    def __init__(
        self,
        message: str = "This email is already taken.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(WallitError):
    """
    A database operation failed unexpectedly.

    The message returned to the client is always generic. Driver and SQL
    details go into `context` and are logged server-side only.
    """

    default_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


_ERRORS_BY_CODE = {
    400: BadRequestError,
    401: UnauthorizedError,
    409: ConflictError,
}


def make_error(code: Optional[int] = None, message: Optional[str] = None) -> WallitError:
    """
    Build (not raise) an error for the given status code.

    Args:
        code: HTTP status code (default 500)
        message: Client-facing message (default "Oops! something went wrong.")

    Returns:
        A BadRequestError, UnauthorizedError or ConflictError for 400, 401 and
        409; a plain WallitError with the code set for anything else.

    Example:
        >>> err = make_error(409, "This email is already taken.")
        >>> err.code, err.message
        (409, 'This email is already taken.')
    """
    code = code or DEFAULT_CODE
    message = message or DEFAULT_MESSAGE
    error_class = _ERRORS_BY_CODE.get(code)
    if error_class is None:
        return WallitError(message=message, code=code)
    return error_class(message=message)
