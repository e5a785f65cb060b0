"""Issuing and verifying signed bearer tokens.

Tokens are stateless JWTs carrying the user id and role. Nothing is stored
server-side: a token with a valid signature whose ``exp`` has not passed is
sufficient proof of identity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

import jwt

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_DELTA = timedelta(hours=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Verified:
    user_id: int


@dataclass(frozen=True)
class Rejected:
    pass


VerificationResult = Union[Verified, Rejected]


class TokenService:
    """Mint and check JWT access tokens.

    ``clock`` returns the current time as an aware UTC ``datetime``; it is
    used both for the ``iat``/``exp`` claims and for the expiry check, so
    tests can move time without sleeping.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = DEFAULT_EXPIRES_DELTA,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret_key:
            raise ValueError("A secret key is required to sign tokens")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_delta = expires_delta
        self._clock = clock

    def issue(self, user_id: int, role: str) -> str:
        """Return a signed token for ``user_id`` valid for ``expires_delta``."""
        now = self._clock()
        payload = {
            "id": user_id,
            "role": role,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires_delta).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, authorization: Optional[str]) -> VerificationResult:
        """Check a raw ``Authorization`` header value.

        The header is expected as ``"<scheme> <token>"``. Any problem with it
        (missing, malformed, bad signature, expired, unusable claims) yields
        :class:`Rejected`; this method does not raise.
        """
        if not authorization:
            return Rejected()
        parts = authorization.split()
        if len(parts) < 2:
            return Rejected()

        try:
            payload = jwt.decode(
                parts[1],
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            return Rejected()

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= self._clock().timestamp():
            return Rejected()

        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return Rejected()
        return Verified(user_id=user_id)
