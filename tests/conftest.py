import os
import sys
import tempfile
import uuid
from pathlib import Path
from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

# Ensure env is set before anything imports app.config
TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="omifem-tests-"))
ADMIN_EMAIL = "owner@omifemcuts.com"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_DIR / 'test.db'}"
os.environ["APP_DEBUG"] = "true"
os.environ["ADMIN_EMAILS"] = ADMIN_EMAIL
os.environ.pop("CLOUDINARY_CLOUD_NAME", None)
os.environ.pop("CLOUDINARY_UPLOAD_PRESET", None)
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

PASSWORD = "secret-pass"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(scope="session")
def app():
    from app.main import app as litestar_app
    return litestar_app


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    from app.auth.session import AuthSessions

    # Fresh session store per test
    app.state.auth = AuthSessions()
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:10]}@example.com"


@pytest.fixture()
def sign_up(client):
    """Register a new account on ``client`` (which is then signed in as it)."""

    async def _sign_up(email: str = None, name: str = "Ada Customer") -> dict:
        resp = await client.post(
            "/api/auth/register",
            json={"email": email or unique_email(), "password": PASSWORD, "name": name},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["user"]

    return _sign_up


@pytest.fixture()
def sign_in_admin(client):
    """Sign ``client`` in as the configured admin, creating it on first use."""

    async def _sign_in_admin() -> dict:
        resp = await client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": PASSWORD})
        if resp.status_code == 401:
            resp = await client.post(
                "/api/auth/register",
                json={"email": ADMIN_EMAIL, "password": PASSWORD, "name": "Shop Owner"},
            )
        assert resp.status_code in (200, 201), resp.text
        user = resp.json()["user"]
        assert user["role"] == "admin"
        return user

    return _sign_in_admin


@pytest.fixture()
def create_style(client, sign_in_admin):
    """Upload a style through the admin API (placeholder image)."""

    async def _create_style(**fields) -> dict:
        await sign_in_admin()
        form = {
            "title": "Ankara Flare Gown",
            "description": "Flared ankara gown with puff sleeves",
            "category": "native",
            "price_without_fabrics": "15000",
            "price_with_fabrics": "30000",
            "delivery_time": "",
            "tags": "ankara, gown",
        }
        form.update({k: str(v) for k, v in fields.items()})
        resp = await client.post(
            "/api/admin/styles",
            data=form,
            files={"image": ("style.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["success"] is True, body
        return body["record"]

    return _create_style
