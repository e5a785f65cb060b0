"""SQLAlchemy models for the holiday_service.

``User`` holds account credentials; ``SavedHoliday`` is the association
between a user and an opaque holiday identifier from the external catalog.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String

from database import Base

HOLIDAY_ID_MAX_LENGTH = 255


class User(Base):
    """ORM model representing an application user.

    Attributes
    ----------
    id:
        Integer primary key generated by the database.
    username:
        Unique, non-empty username.
    email:
        Login lookup key; unique.
    password_hash:
        Argon2 hash of the password. The plaintext is never stored.
    role:
        Free-form role label such as ``"admin"`` or ``"user"``.
    """

    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String(255), unique=True, index=True, nullable=False)
    email: str = Column(String(255), unique=True, index=True, nullable=False)
    password_hash: str = Column(String(255), nullable=False)
    role: str = Column(String(50), nullable=False, default="user")

    def __repr__(self) -> str:
        return f"<User id={self.id!r} username={self.username!r} role={self.role!r}>"

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "role": self.role}


class SavedHoliday(Base):
    """A holiday saved by a user.

    The composite primary key enforces at most one row per
    ``(user_id, holiday_id)`` pair.
    """

    __tablename__ = "user_holidays"

    user_id: int = Column(
        Integer, ForeignKey("users.id"), primary_key=True, index=True
    )
    holiday_id: str = Column(String(HOLIDAY_ID_MAX_LENGTH), primary_key=True)

    def __repr__(self) -> str:
        return f"<SavedHoliday user_id={self.user_id!r} holiday_id={self.holiday_id!r}>"
