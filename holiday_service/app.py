"""Holiday FastAPI application.

Endpoints:

- ``GET /holidays/{country_code}`` — paginated holidays of a country.
- ``GET /holidays/{country_code}/{holiday_code}`` — one holiday by ISO date.
- ``POST /sign-up`` — create an account.
- ``POST /login`` — exchange email and password for a bearer token.
- ``POST /save-holiday/{holiday_id}`` — save a holiday (bearer token required).
- ``DELETE /unsave-holiday/{holiday_id}`` — remove a saved holiday (bearer token required).
- ``GET /saved-holidays`` — list saved holiday ids (bearer token required).

The application is built by :func:`create_app`; run it with
``uvicorn app:create_app --factory`` from this directory. Configuration is loaded once there and
injected into the token service, the database session factory and the
catalog client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Dict, List, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from auth import require_user_id
from catalog import DEFAULT_LIMIT, DEFAULT_OFFSET, HolidayCatalog, paginate
from config import Settings, load_settings
from database import create_engine, create_session_factory, get_db, init_db
from errors import HolidayServiceError
from models import HOLIDAY_ID_MAX_LENGTH  # importing models registers the tables
from saved_holidays import SavedHolidayStore
from schemas import (
    Holiday,
    LoginRequest,
    MessageResponse,
    SavedHolidaysResponse,
    SignUpRequest,
    Token,
    UserResponse,
)
from tokens import TokenService
from users import CredentialStore

logger = logging.getLogger(__name__)

CATALOG_TIMEOUT_SECONDS = 10.0


def _http_error(exc: HolidayServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)


def get_catalog(request: Request) -> HolidayCatalog:
    return request.app.state.catalog


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    catalog: Optional[HolidayCatalog] = None,
) -> FastAPI:
    """Build the application.

    ``engine`` and ``catalog`` are created from ``settings`` unless given;
    resources created here are released on shutdown.
    """
    if settings is None:
        settings = load_settings()

    logging.basicConfig(level=settings.log_level)

    owns_engine = engine is None
    if engine is None:
        engine = create_engine(settings.database_url)

    http_client: Optional[httpx.AsyncClient] = None
    if catalog is None:
        http_client = httpx.AsyncClient(timeout=CATALOG_TIMEOUT_SECONDS)
        catalog = HolidayCatalog(http_client, settings.holidays_api_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_db(engine)
        logger.info("Database initialized")
        try:
            yield
        finally:
            if http_client is not None:
                await http_client.aclose()
            if owns_engine:
                await engine.dispose()

    app = FastAPI(
        root_path=settings.root_path,
        title="Holiday Service",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_service = TokenService(
        settings.secret_key,
        algorithm=settings.algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.catalog = catalog

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    @app.get("/holidays/{country_code}", response_model=List[Holiday])
    async def list_holidays(
        country_code: str,
        limit: int = Query(DEFAULT_LIMIT, ge=0),
        offset: int = Query(DEFAULT_OFFSET, ge=0),
        year: Optional[int] = Query(None, ge=1, le=9999),
        catalog: HolidayCatalog = Depends(get_catalog),
    ) -> List[Holiday]:
        """Return one page of the holidays of ``country_code``.

        ``year`` defaults to the current year.
        """
        try:
            holidays = await catalog.get_holidays(country_code, year or date.today().year)
        except HolidayServiceError as exc:
            raise _http_error(exc) from exc
        return paginate(holidays, limit=limit, offset=offset)

    @app.get("/holidays/{country_code}/{holiday_code}", response_model=Holiday)
    async def get_holiday(
        country_code: str,
        holiday_code: str,
        catalog: HolidayCatalog = Depends(get_catalog),
    ) -> Holiday:
        try:
            holiday = await catalog.get_holiday(country_code, holiday_code)
        except HolidayServiceError as exc:
            raise _http_error(exc) from exc
        if holiday is None:
            raise HTTPException(status_code=404, detail="Holiday not found")
        return holiday

    @app.post("/sign-up", response_model=UserResponse)
    async def sign_up(user: SignUpRequest, db: AsyncSession = Depends(get_db)) -> dict:
        """Create an account; 400 when the username or the email is already taken."""
        try:
            return await CredentialStore(db).create_account(
                user.username, user.password, user.role, email=user.email
            )
        except HolidayServiceError as exc:
            raise _http_error(exc) from exc

    @app.post("/login", response_model=Token)
    async def login(
        credentials: LoginRequest,
        request: Request,
        db: AsyncSession = Depends(get_db),
    ) -> Token:
        """Validate credentials and return a bearer token."""
        try:
            identity = await CredentialStore(db).authenticate(
                credentials.email, credentials.password
            )
        except HolidayServiceError as exc:
            raise _http_error(exc) from exc

        token_service: TokenService = request.app.state.token_service
        return Token(token=token_service.issue(identity.user_id, identity.role))

    @app.post("/save-holiday/{holiday_id}", response_model=MessageResponse)
    async def save_holiday(
        holiday_id: str = Path(max_length=HOLIDAY_ID_MAX_LENGTH),
        user_id: int = Depends(require_user_id),
        db: AsyncSession = Depends(get_db),
    ) -> MessageResponse:
        result = await SavedHolidayStore(db).save(user_id, holiday_id)
        return MessageResponse(message=result.value)

    @app.delete("/unsave-holiday/{holiday_id}", response_model=MessageResponse)
    async def unsave_holiday(
        holiday_id: str = Path(max_length=HOLIDAY_ID_MAX_LENGTH),
        user_id: int = Depends(require_user_id),
        db: AsyncSession = Depends(get_db),
    ) -> MessageResponse:
        result = await SavedHolidayStore(db).unsave(user_id, holiday_id)
        return MessageResponse(message=result.value)

    @app.get("/saved-holidays", response_model=SavedHolidaysResponse)
    async def saved_holidays(
        user_id: int = Depends(require_user_id),
        db: AsyncSession = Depends(get_db),
    ) -> SavedHolidaysResponse:
        holiday_ids = await SavedHolidayStore(db).list_saved(user_id)
        return SavedHolidaysResponse(holiday_ids=holiday_ids)

    @app.get("/health")
    async def health() -> Dict[str, str]:
        """Health check endpoint returning the service status."""
        return {"status": "ok"}
