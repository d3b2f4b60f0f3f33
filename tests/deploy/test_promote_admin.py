"""Tests for deploy/promote_admin.py and deploy/init_db.py."""

import sys
import uuid
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from deploy.init_db import init_db
from deploy.promote_admin import main, set_role
from app.auth.profiles import find_by_email, register_profile
from app.database import build_engine
from app.models import UserRole
from sqlalchemy.ext.asyncio import async_sessionmaker


@pytest.fixture()
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'deploy.db'}"


async def _register(db_url: str, email: str) -> None:
    engine = build_engine(db_url)
    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        await register_profile(session, email, "secret-pass", "Deploy User")
    await engine.dispose()


async def _role_of(db_url: str, email: str) -> UserRole:
    engine = build_engine(db_url)
    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        user = await find_by_email(session, email)
    await engine.dispose()
    return user.role


@pytest.mark.asyncio
async def test_promote_and_revoke(db_url):
    email = f"deploy-{uuid.uuid4().hex[:6]}@example.com"
    await init_db(db_url)
    await _register(db_url, email)

    assert await set_role(email, UserRole.ADMIN, db_url) is True
    assert await _role_of(db_url, email) == UserRole.ADMIN

    assert await set_role(email.upper(), UserRole.USER, db_url) is True
    assert await _role_of(db_url, email) == UserRole.USER


@pytest.mark.asyncio
async def test_promote_unknown_email(db_url):
    await init_db(db_url)
    assert await set_role("nobody@example.com", UserRole.ADMIN, db_url) is False


def test_main_requires_email():
    with pytest.raises(SystemExit):
        main([])
