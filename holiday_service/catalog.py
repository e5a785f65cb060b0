"""Read-only client for the external public holiday catalog.

The catalog is the Nager.Date API: ``GET {base_url}/PublicHolidays/{year}/{country}``
returns the holidays of a country for one year, ordered by date. Calls go
through a :class:`CircuitBreaker` so that an unreachable catalog is rejected
fast instead of tying up every request for the full HTTP timeout.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence, TypeVar

import httpx
from pydantic import TypeAdapter

from circuit_breaker import CircuitBreaker, CircuitOpenError
from errors import CatalogUnavailableError
from schemas import Holiday

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

_holiday_list = TypeAdapter(List[Holiday])


def paginate(items: Sequence[T], limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET) -> List[T]:
    """Return ``items[offset:offset + limit]``; out of range offsets give ``[]``."""
    return list(items[offset : offset + limit])


def create_catalog_circuit_breaker(name: str = "HolidayCatalog") -> CircuitBreaker:
    return CircuitBreaker(
        failure_threshold=3,
        recovery_timeout=30,
        expected_exception=(httpx.HTTPError, ValueError),
        name=name,
    )


class HolidayCatalog:
    """Look up public holidays by country code and year."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        breaker: Optional[CircuitBreaker] = None,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.breaker = breaker or create_catalog_circuit_breaker()

    async def _fetch(self, country_code: str, year: int) -> List[Holiday]:
        url = f"{self.base_url}/PublicHolidays/{year}/{country_code.upper()}"
        resp = await self.client.get(url)
        if resp.status_code == 204 or resp.is_client_error:
            # Unknown country or year: the catalog has nothing to offer.
            logger.info(
                "Catalog returned %s for %s/%s", resp.status_code, country_code, year
            )
            return []
        resp.raise_for_status()
        return _holiday_list.validate_python(resp.json())

    async def get_holidays(self, country_code: str, year: int) -> List[Holiday]:
        """Return the holidays of ``country_code`` in ``year`` in catalog order.

        Raises :class:`CatalogUnavailableError` when the catalog cannot be
        reached, answers with a server error, or the circuit is open.
        """
        try:
            return await self.breaker.call(self._fetch, country_code, year)
        except CircuitOpenError as exc:
            raise CatalogUnavailableError() from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Catalog lookup failed for %s/%s: %s", country_code, year, exc)
            raise CatalogUnavailableError() from exc

    async def get_holiday(self, country_code: str, holiday_code: str) -> Optional[Holiday]:
        """Return the holiday identified by ``holiday_code`` or ``None``.

        The code is the ISO date of the holiday (``2024-07-04``).
        """
        try:
            day = date.fromisoformat(holiday_code)
        except ValueError:
            return None

        for holiday in await self.get_holidays(country_code, day.year):
            if holiday.date == day:
                return holiday
        return None
