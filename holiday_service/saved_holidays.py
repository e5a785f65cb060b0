"""Idempotent save/unsave of holidays for a user (``user_holidays`` table)."""

from __future__ import annotations

import enum
import logging
from typing import List

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models import SavedHoliday

logger = logging.getLogger(__name__)


class SaveResult(str, enum.Enum):
    SAVED = "Holiday saved"
    ALREADY_SAVED = "Holiday already saved"


class UnsaveResult(str, enum.Enum):
    DELETED = "Holiday deleted"
    NOT_FOUND = "Holiday not found"


class SavedHolidayStore:
    """Owns the user/holiday association rows.

    Holiday ids are opaque catalog identifiers and are not checked against
    the catalog. Both mutations are safe to repeat.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _exists(self, user_id: int, holiday_id: str) -> bool:
        stmt = select(SavedHoliday).filter(
            SavedHoliday.user_id == user_id, SavedHoliday.holiday_id == holiday_id
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def save(self, user_id: int, holiday_id: str) -> SaveResult:
        if await self._exists(user_id, holiday_id):
            return SaveResult.ALREADY_SAVED

        self.db.add(SavedHoliday(user_id=user_id, holiday_id=holiday_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            # Only a duplicate pair is benign; other violations propagate.
            if await self._exists(user_id, holiday_id):
                return SaveResult.ALREADY_SAVED
            raise

        logger.info("User id=%s saved holiday %s", user_id, holiday_id)
        return SaveResult.SAVED

    async def unsave(self, user_id: int, holiday_id: str) -> UnsaveResult:
        stmt = delete(SavedHoliday).where(
            SavedHoliday.user_id == user_id, SavedHoliday.holiday_id == holiday_id
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount == 0:
            return UnsaveResult.NOT_FOUND
        logger.info("User id=%s removed holiday %s", user_id, holiday_id)
        return UnsaveResult.DELETED

    async def list_saved(self, user_id: int) -> List[str]:
        """Return the holiday ids saved by ``user_id``, sorted."""
        stmt = (
            select(SavedHoliday.holiday_id)
            .filter(SavedHoliday.user_id == user_id)
            .order_by(SavedHoliday.holiday_id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
