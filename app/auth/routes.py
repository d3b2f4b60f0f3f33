"""Sign-in pages."""

from typing import Annotated, Optional

from litestar import Request, get
from litestar.params import Parameter
from litestar.response import Redirect, Response, Template

from app.auth.session import SESSION_COOKIE, forget_current_user, get_auth
from app.models import User
from app.utils import get_base_path, safe_next_path

LOGIN_ERRORS = {
    "google": "Google sign-in failed. Please try again.",
}


def _auth_page(
    template_name: str,
    request: Request,
    current_user: Optional[User],
    next_path: Optional[str],
) -> Response:
    base_path = get_base_path(request)
    target = safe_next_path(next_path)
    if current_user is not None:
        return Redirect(f"{base_path}{target}")
    return Template(
        template_name=template_name,
        context={
            "base_path": base_path,
            "current_user": None,
            "next_path": target,
            "error": LOGIN_ERRORS.get(request.query_params.get("error", "")),
        },
    )


@get("/login")
async def login_page(
    request: Request,
    current_user: Optional[User],
    next_path: Annotated[Optional[str], Parameter(query="next")] = None,
) -> Response:
    """Email/password and Google sign-in."""
    return _auth_page("auth/login.html", request, current_user, next_path)


@get("/register")
async def register_page(
    request: Request,
    current_user: Optional[User],
    next_path: Annotated[Optional[str], Parameter(query="next")] = None,
) -> Response:
    """Account creation."""
    return _auth_page("auth/register.html", request, current_user, next_path)


@get("/logout")
async def logout_page(request: Request) -> Redirect:
    """Sign out (GET handler for plain links)."""
    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id:
        await get_auth(request).sign_out(session_id)
    forget_current_user(request)
    response = Redirect(f"{get_base_path(request)}/")
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response


routes = [login_page, register_page, logout_page]
