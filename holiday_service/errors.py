"""Domain exceptions raised by the stores and the auth gateway.

Routes in :mod:`app` translate them into ``HTTPException`` responses using
``status_code`` and the exception message.
"""

from __future__ import annotations


class HolidayServiceError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = 400
    message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class UserAlreadyExistsError(HolidayServiceError):
    status_code = 400
    message = "User already exists"


class EmailAlreadyRegisteredError(HolidayServiceError):
    """The username is free but the email (login key) belongs to another user."""

    status_code = 400
    message = "Email already registered"


class InvalidCredentialsError(HolidayServiceError):
    """Unknown email or wrong password; the two cases are not distinguished."""

    status_code = 401
    message = "Invalid email or password"


class NotAuthorizedError(HolidayServiceError):
    status_code = 401
    message = "Not authorized"


class CatalogUnavailableError(HolidayServiceError):
    status_code = 502
    message = "Holiday catalog unavailable"
