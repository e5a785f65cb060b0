"""Auth gateway: the single check every protected route passes through.

:func:`authorize` turns request headers into a verified user id or raises
:class:`NotAuthorizedError`. The reason a token was rejected is never exposed.
"""

from __future__ import annotations

from typing import Mapping

from fastapi import Depends, HTTPException, Request, status

from errors import NotAuthorizedError
from tokens import TokenService, Verified


def authorize(headers: Mapping[str, str], token_service: TokenService) -> int:
    """Return the user id carried by the ``authorization`` header.

    ``headers`` is looked up with a lower-case key; Starlette ``Headers``
    are case-insensitive.
    """
    result = token_service.verify(headers.get("authorization"))
    if isinstance(result, Verified):
        return result.user_id
    raise NotAuthorizedError()


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def require_user_id(
    request: Request, token_service: TokenService = Depends(get_token_service)
) -> int:
    """FastAPI dependency returning the authenticated user id or a 401."""
    try:
        return authorize(request.headers, token_service)
    except NotAuthorizedError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
