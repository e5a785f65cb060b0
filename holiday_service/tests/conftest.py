"""Pytest configuration and shared fixtures."""
import sys
from datetime import date
from pathlib import Path

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# Add service root to path for imports
service_root = Path(__file__).parent.parent
sys.path.insert(0, str(service_root))

from app import create_app  # noqa: E402
from config import Settings  # noqa: E402
from database import create_session_factory, init_db  # noqa: E402
from schemas import Holiday  # noqa: E402
from tokens import TokenService  # noqa: E402

SECRET_KEY = "test-secret-key-with-enough-bytes-for-hs256"


def make_holiday(day: str, name: str, country_code: str = "US") -> Holiday:
    return Holiday(
        date=date.fromisoformat(day),
        local_name=name,
        name=name,
        country_code=country_code,
        fixed=False,
        global_=True,
        types=["Public"],
    )


US_HOLIDAYS = [
    make_holiday("2024-01-01", "New Year's Day"),
    make_holiday("2024-01-15", "Martin Luther King, Jr. Day"),
    make_holiday("2024-02-19", "Presidents Day"),
    make_holiday("2024-05-27", "Memorial Day"),
    make_holiday("2024-06-19", "Juneteenth National Independence Day"),
    make_holiday("2024-07-04", "Independence Day"),
    make_holiday("2024-09-02", "Labour Day"),
    make_holiday("2024-10-14", "Columbus Day"),
    make_holiday("2024-11-11", "Veterans Day"),
    make_holiday("2024-11-28", "Thanksgiving Day"),
    make_holiday("2024-12-25", "Christmas Day"),
]


class FakeCatalog:
    """In-memory stand-in for the external holiday catalog."""

    def __init__(self, holidays):
        self.holidays = holidays
        self.calls = []

    async def get_holidays(self, country_code, year):
        self.calls.append((country_code, year))
        if country_code.upper() != "US":
            return []
        return list(self.holidays)

    async def get_holiday(self, country_code, holiday_code):
        for holiday in await self.get_holidays(country_code, 2024):
            if holiday.date.isoformat() == holiday_code:
                return holiday
        return None


@pytest.fixture
def settings():
    return Settings(secret_key=SECRET_KEY, database_url="sqlite+aiosqlite://")


@pytest.fixture
def token_service():
    return TokenService(SECRET_KEY)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
def catalog():
    return FakeCatalog(US_HOLIDAYS)


@pytest.fixture
def app(settings, engine, catalog):
    return create_app(settings, engine=engine, catalog=catalog)


@pytest.fixture
async def client(app):
    """Create test client"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
