#!/usr/bin/env python3
"""
Grant (or revoke) the admin role by email.

Usage:
    python deploy/promote_admin.py owner@example.com
    python deploy/promote_admin.py owner@example.com --revoke
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.auth.profiles import find_by_email
from app.config import DATABASE_URL
from app.database import build_engine
from app.models import UserRole
from sqlalchemy.ext.asyncio import async_sessionmaker


async def set_role(email: str, role: UserRole, database_url: str = DATABASE_URL) -> bool:
    """Set ``role`` on the profile with ``email``. Returns False if there is none."""
    engine = build_engine(database_url)
    maker = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with maker() as session:
            user = await find_by_email(session, email)
            if user is None:
                print(f"ERROR: no user with email {email}")
                return False
            user.role = role
            await session.commit()
            print(f"✓ {user.email} is now {role.value}")
            return True
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke the admin role")
    parser.add_argument("email", help="Email of an existing user")
    parser.add_argument("--revoke", action="store_true", help="Demote to a regular user")
    args = parser.parse_args(argv)
    
    role = UserRole.USER if args.revoke else UserRole.ADMIN
    ok = asyncio.run(set_role(args.email, role))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
