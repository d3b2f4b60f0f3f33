from pathlib import Path

from app.home.routes import routes as routes_home
from app.catalog.routes import routes as routes_catalog
from app.auth.routes import routes as routes_auth
from app.auth.oauth import routes as routes_oauth
from app.admin.routes import routes as routes_admin
from app.api.admin import AdminController
from app.api.auth import AuthController
from app.api.feedback import FeedbackController
from app.api.styles import StylesController
from litestar.static_files import create_static_files_router

STATIC_DIR = Path(__file__).parent / "static"

ROUTES = [
    *routes_home,
    *routes_catalog,
    *routes_auth,
    *routes_oauth,
    *routes_admin,
    AuthController,
    StylesController,
    FeedbackController,
    AdminController,
    create_static_files_router(
        path="/static",
        directories=[STATIC_DIR],
        name="static-files"
    )
]
