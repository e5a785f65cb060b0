"""Account creation and credential checks backed by the ``users`` table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from errors import (
    EmailAlreadyRegisteredError,
    HolidayServiceError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from models import User
from security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str


class CredentialStore:
    """Owns user rows: sign-up with hashed passwords and login checks."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _conflict(self, username: str, email: str) -> Optional[HolidayServiceError]:
        """Return the error for a taken username or email, if any."""
        stmt = select(User).filter(or_(User.username == username, User.email == email))
        result = await self.db.execute(stmt)
        users = result.scalars().all()
        if any(user.username == username for user in users):
            return UserAlreadyExistsError()
        if users:
            return EmailAlreadyRegisteredError()
        return None

    async def create_account(
        self,
        username: str,
        password: str,
        role: str = "user",
        email: Optional[str] = None,
    ) -> dict:
        """Create a user and return ``{"id", "username", "role"}``.

        Raises :class:`UserAlreadyExistsError` when the username is taken and
        :class:`EmailAlreadyRegisteredError` when only the email is, without
        writing anything. ``email`` falls back to the username.
        """
        email = email or username
        conflict = await self._conflict(username, email)
        if conflict is not None:
            logger.info("Sign-up rejected for %s: %s", username, conflict)
            raise conflict

        new_user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
        )
        self.db.add(new_user)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent sign-up won the race on the unique index.
            await self.db.rollback()
            conflict = await self._conflict(username, email)
            if conflict is None:
                raise
            logger.info("Sign-up rejected by unique constraint for %s: %s", username, conflict)
            raise conflict

        logger.info("Created user id=%s username=%s", new_user.id, username)
        return new_user.to_dict()

    async def authenticate(self, email: str, password: str) -> Identity:
        """Return the identity for valid credentials.

        Raises :class:`InvalidCredentialsError` both for an unknown email and
        for a wrong password.
        """
        stmt = select(User).filter(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", email)
            raise InvalidCredentialsError()

        logger.info("User id=%s logged in", user.id)
        return Identity(user_id=user.id, role=user.role)
