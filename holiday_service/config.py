"""Process configuration for the holiday_service.

Settings are read once from the environment (optionally populated from a
``.env`` file) and passed explicitly into :func:`app.create_app`. The signing
secret is mandatory: :func:`load_settings` raises at startup when it is
missing so that a misconfigured process never starts serving requests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_SECRET_KEY = "SECRET_KEY"
ENV_ALGORITHM = "ALGORITHM"
ENV_ACCESS_EXPIRE = "ACCESS_TOKEN_EXPIRE_MINUTES"
ENV_DATABASE_URL = "DATABASE_URL"
ENV_HOLIDAYS_API_URL = "HOLIDAYS_API_URL"
ENV_ROOT_PATH = "ROOT_PATH"
ENV_LOG_LEVEL = "LOG_LEVEL"

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost:5432/holidays"
DEFAULT_HOLIDAYS_API_URL = "https://date.nager.at/api/v3"


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    database_url: str = DEFAULT_DATABASE_URL
    holidays_api_url: str = DEFAULT_HOLIDAYS_API_URL
    root_path: str = ""
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``).

    Raises ``ValueError`` when ``SECRET_KEY`` is missing or when
    ``ACCESS_TOKEN_EXPIRE_MINUTES`` is not an integer.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    secret_key = environ.get(ENV_SECRET_KEY)
    if not secret_key:
        raise ValueError(f"{ENV_SECRET_KEY} must be set in the environment")

    _access_exp = environ.get(ENV_ACCESS_EXPIRE, "60")
    try:
        access_token_expire_minutes = int(_access_exp)
    except ValueError as exc:
        raise ValueError(f"{ENV_ACCESS_EXPIRE} must be an integer") from exc

    return Settings(
        secret_key=secret_key,
        algorithm=environ.get(ENV_ALGORITHM) or "HS256",
        access_token_expire_minutes=access_token_expire_minutes,
        database_url=environ.get(ENV_DATABASE_URL) or DEFAULT_DATABASE_URL,
        holidays_api_url=environ.get(ENV_HOLIDAYS_API_URL) or DEFAULT_HOLIDAYS_API_URL,
        root_path=environ.get(ENV_ROOT_PATH, ""),
        log_level=environ.get(ENV_LOG_LEVEL) or "INFO",
    )
