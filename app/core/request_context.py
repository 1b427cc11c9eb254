from typing import Optional

from fastapi import Request
from jose import JWTError
from pydantic import BaseModel

from app.core.config import Config
from app.core.exceptions import AccessTokenRequired, AccountLocked, InvalidToken
from app.core.jwt import decode_token


class UserContext(BaseModel):
    user_id: str
    username: Optional[str] = None
    is_locked: bool = False


def get_access_token(request: Request) -> Optional[str]:
    token = request.cookies.get(Config.ACCESS_TOKEN_COOKIE)
    if not token:
        return None

    token = token.strip()
    return token or None


def get_user_context(request: Request) -> UserContext:
    """Resolve the caller from the access-token cookie.

    Used as a route dependency; every ledger and bank route goes through it.
    """
    token = get_access_token(request)
    if not token:
        raise AccessTokenRequired()

    try:
        claims = decode_token(token)
    except JWTError as exc:
        raise InvalidToken() from exc

    user_id = claims.get("_id") or claims.get("sub")
    if not user_id:
        raise InvalidToken()

    user_ctx = UserContext(
        user_id=str(user_id),
        username=claims.get("username"),
        is_locked=bool(claims.get("isLocked", False)),
    )
    if user_ctx.is_locked:
        raise AccountLocked()

    request.state.user_context = user_ctx
    return user_ctx


def actor_name(user_ctx: Optional[UserContext], explicit: Optional[str] = None) -> str:
    if explicit and explicit.strip():
        return explicit.strip()
    if user_ctx and user_ctx.username:
        return user_ctx.username
    return "system"
