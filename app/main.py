import logging
from pathlib import Path
from typing import Any

# Configuration (and the .env fallback) must load before routes import it
from app.config import DATABASE_URL, DEBUG, GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, image_hosting_configured

from litestar import Litestar, Request
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.datastructures import State
from litestar.di import Provide
from litestar.exceptions import HTTPException, NotAuthorizedException, PermissionDeniedException
from litestar.plugins.sqlalchemy import AsyncSessionConfig, SQLAlchemyAsyncConfig, SQLAlchemyInitPlugin
from litestar.response import Redirect, Response, Template
from litestar.status_codes import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN, HTTP_500_INTERNAL_SERVER_ERROR
from litestar.template.config import TemplateConfig

from app.auth.session import AuthSessions, provide_current_user
from app.database import engine, session_maker
from app.models import Base
from app.routes import ROUTES
from app.utils import get_base_path
from app.utils.contact import custom_design_link, enquiry_link, format_naira
from app.utils.dates import format_date
from app.utils.logging import log_request_error

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("Omifem")

logger.info(f"Starting app in {'DEBUG' if DEBUG else 'PRODUCTION'} mode")
logger.info(f"Database: {DATABASE_URL.split('@')[-1]}")

if GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET:
    logger.info("✓ Google sign-in configured")
else:
    logger.warning("⚠ Google sign-in not configured (GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET missing)")

if not image_hosting_configured():
    logger.warning("⚠ Image hosting not configured, uploaded styles will use a placeholder image")

# --- SQLAlchemy config
config = SQLAlchemyAsyncConfig(
    engine_instance=engine,
    session_dependency_key="session",
    session_config=AsyncSessionConfig(expire_on_commit=False),
    metadata=Base.metadata,
    create_all=DEBUG,  # Auto-create tables on startup (dev only)
)
plugin = SQLAlchemyInitPlugin(config)

# --- Template config (auto-discovery)
template_dirs = [
    str(p) for p in Path(__file__).parent.glob("**/templates") if p.is_dir()
]


def register_template_globals(engine: JinjaTemplateEngine) -> None:
    """Register template filters and globals."""
    engine.engine.filters["format_date"] = format_date
    engine.engine.filters["naira"] = format_naira
    engine.engine.globals["enquiry_link"] = enquiry_link
    engine.engine.globals["custom_design_link"] = custom_design_link


template_config = TemplateConfig(
    directory=template_dirs,
    engine=JinjaTemplateEngine,
    engine_callback=register_template_globals,
)


def _is_api(request: Request) -> bool:
    return "/api/" in request.url.path


# --- Exception handlers
def log_exceptions(request: Request, exc: Exception) -> Response:
    log_request_error(request, exc, message="Unhandled exception occurred")
    return Response(
        content={"detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json"
    )


def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    """Expected failures (404, validation...) keep their status code."""
    content: dict[str, Any] = {"status_code": exc.status_code, "detail": exc.detail}
    if exc.extra:
        content["extra"] = exc.extra
    return Response(
        content=content,
        status_code=exc.status_code,
        headers=exc.headers,
        media_type="application/json",
    )


def handle_auth_exception(request: Request, exc: NotAuthorizedException) -> Response:
    """Not signed in: redirect pages to the login page, JSON for the API."""
    if _is_api(request):
        return Response(
            content={"detail": exc.detail or "Not authorized"},
            status_code=HTTP_401_UNAUTHORIZED,
            media_type="application/json"
        )
    base_path = get_base_path(request)
    return Redirect(f"{base_path}/login?next={request.url.path}")


def handle_permission_exception(request: Request, exc: PermissionDeniedException) -> Response:
    """Signed in without the admin role."""
    if _is_api(request):
        return Response(
            content={"detail": exc.detail or "Access denied"},
            status_code=HTTP_403_FORBIDDEN,
            media_type="application/json"
        )
    return Template(
        template_name="admin/access_denied.html",
        context={"base_path": get_base_path(request), "message": exc.detail},
        status_code=HTTP_403_FORBIDDEN,
    )


# --- App init
app = Litestar(
    route_handlers=ROUTES,
    debug=DEBUG,
    plugins=[plugin],
    template_config=template_config,
    dependencies={"current_user": Provide(provide_current_user)},
    state=State({"auth": AuthSessions(), "session_maker": session_maker}),
    exception_handlers={
        Exception: log_exceptions,
        HTTPException: handle_http_exception,
        NotAuthorizedException: handle_auth_exception,
        PermissionDeniedException: handle_permission_exception,
    }
)
