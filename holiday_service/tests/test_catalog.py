"""Tests for the holiday catalog client and pagination."""

from datetime import date

import httpx
import pytest

from catalog import HolidayCatalog, paginate
from circuit_breaker import CircuitBreaker
from errors import CatalogUnavailableError

BASE_URL = "https://catalog.test/api/v3"

NAGER_US_2024 = [
    {
        "date": "2024-01-01",
        "localName": "New Year's Day",
        "name": "New Year's Day",
        "countryCode": "US",
        "fixed": False,
        "global": True,
        "counties": None,
        "launchYear": None,
        "types": ["Public"],
    },
    {
        "date": "2024-07-04",
        "localName": "Independence Day",
        "name": "Independence Day",
        "countryCode": "US",
        "fixed": False,
        "global": True,
        "counties": None,
        "launchYear": None,
        "types": ["Public"],
    },
]


def make_catalog(handler, breaker=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HolidayCatalog(client, BASE_URL, breaker=breaker)


def nager_handler(request):
    if request.url.path == "/api/v3/PublicHolidays/2024/US":
        return httpx.Response(200, json=NAGER_US_2024)
    return httpx.Response(404)


@pytest.mark.asyncio
async def test_get_holidays_parses_catalog_records():
    catalog = make_catalog(nager_handler)

    holidays = await catalog.get_holidays("us", 2024)

    assert [h.date for h in holidays] == [date(2024, 1, 1), date(2024, 7, 4)]
    assert holidays[1].local_name == "Independence Day"
    assert holidays[1].global_ is True


@pytest.mark.asyncio
async def test_unknown_country_gives_empty_list():
    catalog = make_catalog(nager_handler)

    assert await catalog.get_holidays("XX", 2024) == []


@pytest.mark.asyncio
async def test_get_holiday_by_iso_date():
    catalog = make_catalog(nager_handler)

    holiday = await catalog.get_holiday("US", "2024-07-04")

    assert holiday is not None
    assert holiday.name == "Independence Day"


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["2024-03-01", "independence-day", ""])
async def test_get_holiday_absent(code):
    catalog = make_catalog(nager_handler)

    assert await catalog.get_holiday("US", code) is None


@pytest.mark.asyncio
async def test_server_errors_open_the_circuit():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    breaker = CircuitBreaker(
        failure_threshold=2,
        recovery_timeout=60,
        expected_exception=(httpx.HTTPError, ValueError),
    )
    catalog = make_catalog(handler, breaker=breaker)

    for _ in range(3):
        with pytest.raises(CatalogUnavailableError):
            await catalog.get_holidays("US", 2024)

    assert len(calls) == 2
    assert breaker.get_state() == "OPEN"


@pytest.mark.asyncio
async def test_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    catalog = make_catalog(handler)

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_holidays("US", 2024)


def test_paginate_slices():
    items = list(range(25))

    assert paginate(items) == list(range(10))
    assert paginate(items, limit=5, offset=20) == [20, 21, 22, 23, 24]
    assert paginate(items, limit=10, offset=20) == [20, 21, 22, 23, 24]
    assert paginate(items, limit=3, offset=25) == []
    assert paginate(items, limit=0, offset=0) == []
