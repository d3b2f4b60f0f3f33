"""Signed-in identity: server-side sessions, current user lookup and guards."""

import logging
import secrets
import uuid
from typing import Optional

from litestar import Request
from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException, PermissionDeniedException
from litestar.handlers.base import BaseRouteHandler
from litestar.response import Response
from litestar.stores.base import Store
from litestar.stores.memory import MemoryStore

from app.config import SESSION_TTL_SECONDS
from app.models import User

logger = logging.getLogger("Omifem.auth")

SESSION_COOKIE = "session_id"
_USER_KEY = "user"
_OAUTH_STATE_KEY = "oauth_state"
_CURRENT_USER_STATE = "current_user"


def _decode(raw: Optional[bytes | str]) -> Optional[str]:
    # MemoryStore hands values back as bytes
    if raw is None:
        return None
    if isinstance(raw, bytes):
        return raw.decode("utf-8")
    return str(raw)


class AuthSessions:
    """Maps opaque session ids (the ``session_id`` cookie) to user ids.
    
    One instance is built at application start and kept on ``app.state.auth``;
    handlers reach it through the connection rather than a module global.
    """
    
    def __init__(self, store: Optional[Store] = None, ttl: int = SESSION_TTL_SECONDS) -> None:
        self.store = store or MemoryStore()
        self.ttl = ttl
    
    async def sign_in(self, user: User, session_id: Optional[str] = None) -> str:
        """Bind ``user`` to a (new) session id and return it."""
        session_id = session_id or secrets.token_urlsafe(32)
        await self.store.set(f"{_USER_KEY}:{session_id}", str(user.id), expires_in=self.ttl)
        logger.info(f"Signed in {user.email} (session {session_id[:8]}...)")
        return session_id
    
    async def sign_out(self, session_id: str) -> None:
        await self.store.delete(f"{_USER_KEY}:{session_id}")
        logger.info(f"Signed out session {session_id[:8]}...")
    
    async def user_id_for(self, session_id: str) -> Optional[uuid.UUID]:
        value = _decode(await self.store.get(f"{_USER_KEY}:{session_id}"))
        if not value:
            return None
        try:
            return uuid.UUID(value)
        except ValueError:
            logger.warning(f"Malformed user id in session {session_id[:8]}...")
            return None
    
    async def remember_oauth_state(self, session_id: str, state: str) -> None:
        await self.store.set(f"{_OAUTH_STATE_KEY}:{session_id}", state, expires_in=600)  # 10 min expiry
    
    async def pop_oauth_state(self, session_id: str) -> Optional[str]:
        key = f"{_OAUTH_STATE_KEY}:{session_id}"
        value = _decode(await self.store.get(key))
        await self.store.delete(key)
        return value


def get_auth(connection: ASGIConnection) -> AuthSessions:
    return connection.app.state.auth


def set_session_cookie(response: Response, connection: ASGIConnection, session_id: str) -> Response:
    is_secure = connection.url.scheme == "https"
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        httponly=True,
        secure=is_secure,
        samesite="lax",
        max_age=get_auth(connection).ttl,
        path="/",
    )
    return response


async def resolve_current_user(connection: ASGIConnection) -> Optional[User]:
    """Load the signed-in user for this connection, once per request."""
    cached = connection.state.get(_CURRENT_USER_STATE, False)
    if cached is not False:
        return cached
    
    user = None
    session_id = connection.cookies.get(SESSION_COOKIE)
    if session_id:
        user_id = await get_auth(connection).user_id_for(session_id)
        if user_id:
            async with connection.app.state.session_maker() as db:
                user = await db.get(User, user_id)
            if user is None:
                # Profile was deleted by an admin
                await get_auth(connection).sign_out(session_id)
    
    connection.state[_CURRENT_USER_STATE] = user
    return user


def forget_current_user(connection: ASGIConnection) -> None:
    connection.state[_CURRENT_USER_STATE] = False


async def provide_current_user(request: Request) -> Optional[User]:
    """Dependency: the signed-in user, or None."""
    return await resolve_current_user(request)


async def require_user_guard(connection: ASGIConnection, handler: BaseRouteHandler) -> None:
    """Guard to require any signed-in user."""
    user = await resolve_current_user(connection)
    if user is None:
        logger.debug(f"Anonymous access rejected: {connection.url.path}")
        raise NotAuthorizedException("Please login to continue")


async def require_admin_guard(connection: ASGIConnection, handler: BaseRouteHandler) -> None:
    """Guard to require a signed-in admin."""
    path = connection.url.path
    user = await resolve_current_user(connection)
    
    if user is None:
        logger.warning(f"Admin access attempted without authentication: {path}")
        raise NotAuthorizedException("Not authenticated")
    
    if not user.is_admin:
        logger.warning(f"Admin access attempted by non-admin {user.email}: {path}")
        raise PermissionDeniedException("Access denied. Admin privileges required.")
    
    logger.debug(f"Admin access granted for: {user.email}")
