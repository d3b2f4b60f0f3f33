"""Google sign-in (federated, single button)."""

import logging
import secrets

from authlib.integrations.httpx_client import AsyncOAuth2Client
from litestar import Request, get
from litestar.exceptions import NotAuthorizedException
from litestar.response import Redirect, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.auth.profiles import get_or_create_profile
from app.auth.session import SESSION_COOKIE, get_auth, set_session_cookie
from app.utils import get_base_path

logger = logging.getLogger("Omifem.auth")

# OAuth endpoints
GOOGLE_AUTHORIZATION_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def get_redirect_uri(request: Request) -> str:
    """Get the OAuth redirect URI based on the request."""
    scheme = request.url.scheme
    host = request.url.hostname
    port = request.url.port
    base_path = get_base_path(request)

    if port and port != (443 if scheme == "https" else 80):
        return f"{scheme}://{host}:{port}{base_path}/auth/google/callback"
    return f"{scheme}://{host}{base_path}/auth/google/callback"


def oauth_client(request: Request) -> AsyncOAuth2Client:
    return AsyncOAuth2Client(
        client_id=config.GOOGLE_CLIENT_ID,
        client_secret=config.GOOGLE_CLIENT_SECRET,
        redirect_uri=get_redirect_uri(request),
    )


async def fetch_google_profile(request: Request, code: str) -> dict:
    """Exchange the authorization code and read the Google profile."""
    async with oauth_client(request) as client:
        token_response = await client.fetch_token(GOOGLE_TOKEN_URL, code=code)
        access_token = token_response.get("access_token")
        if not access_token:
            raise ValueError("No access token in response")

        headers = {"Authorization": f"Bearer {access_token}"}
        user_info = await client.get(GOOGLE_USERINFO_URL, headers=headers)
        return user_info.json()


@get("/auth/google")
async def google_login(request: Request) -> Redirect:
    """Start Google sign-in."""
    if not config.GOOGLE_CLIENT_ID or not config.GOOGLE_CLIENT_SECRET:
        logger.error("Google OAuth credentials not configured")
        raise NotAuthorizedException("Google sign-in is not configured")

    # CSRF state token, bound to a pre-login session id
    state = secrets.token_urlsafe(32)
    session_id = request.cookies.get(SESSION_COOKIE) or secrets.token_urlsafe(32)
    await get_auth(request).remember_oauth_state(session_id, state)

    auth_url, _ = oauth_client(request).create_authorization_url(
        GOOGLE_AUTHORIZATION_BASE_URL,
        state=state,
        scope="openid email profile",
    )

    response = Redirect(auth_url)
    set_session_cookie(response, request, session_id)
    logger.debug(f"Set session_id cookie: {session_id[:8]}... for redirect to Google")
    return response


@get("/auth/google/callback")
async def google_callback(request: Request, session: AsyncSession) -> Response:
    """Finish Google sign-in and create the profile on first login."""
    code = request.query_params.get("code")
    state = request.query_params.get("state")
    error = request.query_params.get("error")
    base_path = get_base_path(request)

    if error:
        logger.warning(f"OAuth error: {error}")
        return Redirect(f"{base_path}/login?error=google")

    if not code or not state:
        return Response(
            content={"error": "Missing code or state"},
            status_code=400,
            media_type="application/json"
        )

    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id:
        logger.warning(f"No session_id cookie found in callback. Cookies: {list(request.cookies.keys())}")
        return Response(
            content={"error": "No session found"},
            status_code=400,
            media_type="application/json"
        )

    stored_state = await get_auth(request).pop_oauth_state(session_id)
    if not stored_state or stored_state != state:
        logger.warning(f"OAuth state missing or mismatched for session_id: {session_id[:8]}...")
        return Response(
            content={"error": "Invalid state token"},
            status_code=400,
            media_type="application/json"
        )

    try:
        profile = await fetch_google_profile(request, code)
    except Exception:
        logger.exception("OAuth token exchange failed")
        return Redirect(f"{base_path}/login?error=google")

    email = profile.get("email")
    if not email:
        logger.warning("Google profile without email")
        return Redirect(f"{base_path}/login?error=google")

    user = await get_or_create_profile(
        session,
        email=email,
        name=profile.get("name"),
        photo_url=profile.get("picture"),
    )

    # Fresh session id on privilege change
    new_session_id = await get_auth(request).sign_in(user)
    response = Redirect(f"{base_path}/")
    set_session_cookie(response, request, new_session_id)
    return response


routes = [google_login, google_callback]
