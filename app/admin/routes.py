"""Admin page routes."""

from typing import Optional

from litestar import Request, get
from litestar.exceptions import HTTPException
from litestar.response import Template

from app.admin.analytics import DashboardLoadError, compute_analytics, load_dashboard
from app.auth.session import require_admin_guard
from app.catalog.detail import StyleView
from app.models import StyleCategory, User, UserRole
from app.utils import get_base_path

TABS = ("analytics", "users", "styles", "feedback")


@get("/admin", guards=[require_admin_guard])
async def admin_dashboard(
    request: Request,
    current_user: Optional[User],
    tab: Optional[str] = None,
) -> Template:
    """Admin dashboard page (requires the admin role)."""
    try:
        data = await load_dashboard(request.app.state.session_maker)
    except DashboardLoadError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    return Template(
        template_name="admin/dashboard.html",
        context={
            "base_path": get_base_path(request),
            "current_user": current_user,
            "tab": tab if tab in TABS else TABS[0],
            "tabs": TABS,
            "analytics": compute_analytics(data.users, data.styles, data.feedbacks),
            "users": data.users,
            "styles": [StyleView.from_style(s) for s in data.styles],
            "feedbacks": data.feedbacks,
            "categories": list(StyleCategory),
            "roles": list(UserRole),
        },
    )


routes = [admin_dashboard]
