from __future__ import annotations

import logging

from fastapi import Request, Response

from app.services.auth import InvalidSessionToken, create_session_token, decode_session_token
from app.utils.config import settings
from app.utils.errors import Unauthenticated


logger = logging.getLogger(__name__)


def set_session_cookie(response: Response, user_id: str) -> str:
    """Issue a session token for ``user_id`` and attach it as the session cookie.

    The cookie expires together with the token it carries.
    """
    token = create_session_token(user_id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        max_age=settings.session_max_age_seconds,
    )
    return token


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def require_session(request: Request) -> str:
    """Auth dependency that validates the session cookie.

    Stores the user id on ``request.state.user_id`` and returns it, so any
    protected route can depend on it.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise Unauthenticated("Unauthorized - no token provided")
    try:
        user_id = decode_session_token(token)
    except InvalidSessionToken as exc:
        logger.info("Rejected session token: %s", exc)
        raise Unauthenticated("Unauthorized - token is not valid")
    request.state.user_id = user_id
    return user_id
