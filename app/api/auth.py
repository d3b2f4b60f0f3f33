"""Account API: registration, email login, logout and the current user."""

import logging
from typing import Optional

from litestar import Controller, Request, get, post
from litestar.exceptions import NotAuthorizedException, ValidationException
from litestar.response import Response
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import UserResponse, user_response
from app.auth.profiles import DuplicateEmailError, authenticate, register_profile
from app.auth.session import (
    SESSION_COOKIE,
    forget_current_user,
    get_auth,
    set_session_cookie,
)
from app.models import User

logger = logging.getLogger("Omifem.auth")


# --- Request/Response Schemas ---

class RegisterRequest(BaseModel):
    """Request to create an email/password account."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=200)


class LoginRequest(BaseModel):
    """Request to sign in with email and password."""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SessionResponse(BaseModel):
    """Who is signed in after an auth action."""
    success: bool
    message: str
    user: Optional[UserResponse] = None


# --- Controller ---

class AuthController(Controller):
    """API endpoints for signing in and out."""
    
    path = "/api/auth"
    tags = ["auth"]
    
    async def _signed_in(self, request: Request, user: User, message: str, status_code: int) -> Response:
        session_id = await get_auth(request).sign_in(user)
        forget_current_user(request)
        response = Response(
            content=SessionResponse(success=True, message=message, user=user_response(user)),
            status_code=status_code,
        )
        return set_session_cookie(response, request, session_id)
    
    @post("/register")
    async def register(
        self,
        request: Request,
        data: RegisterRequest,
        session: AsyncSession,
    ) -> Response:
        """Create an account and sign it in."""
        try:
            user = await register_profile(session, str(data.email), data.password, data.name)
        except DuplicateEmailError as e:
            raise ValidationException(str(e))
        return await self._signed_in(request, user, "Account created successfully", 201)
    
    @post("/login")
    async def login(
        self,
        request: Request,
        data: LoginRequest,
        session: AsyncSession,
    ) -> Response:
        """Sign in with email and password."""
        user = await authenticate(session, str(data.email), data.password)
        if user is None:
            raise NotAuthorizedException("Invalid email or password")
        return await self._signed_in(request, user, "Logged in successfully", 200)
    
    @post("/logout", status_code=200)
    async def logout(self, request: Request) -> Response:
        """Sign out the current session."""
        session_id = request.cookies.get(SESSION_COOKIE)
        if session_id:
            await get_auth(request).sign_out(session_id)
        forget_current_user(request)
        response = Response(content=SessionResponse(success=True, message="Logged out"))
        response.delete_cookie(SESSION_COOKIE, path="/")
        return response
    
    @get("/me")
    async def me(self, current_user: Optional[User]) -> SessionResponse:
        """The signed-in user, if any."""
        if current_user is None:
            return SessionResponse(success=False, message="Not signed in")
        return SessionResponse(success=True, message="Signed in", user=user_response(current_user))
