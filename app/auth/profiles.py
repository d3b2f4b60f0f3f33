"""User profile creation and credential checks."""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.models import User, UserRole

logger = logging.getLogger("Omifem.auth")

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class DuplicateEmailError(ValueError):
    """An account with this email already exists."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(password, hashed)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_display_name(email: str, name: Optional[str] = None) -> str:
    """Display name, falling back to the local part of the email."""
    if name and name.strip():
        return name.strip()
    local = email.split("@", 1)[0]
    return local or "User"


def initial_role(email: str) -> UserRole:
    return UserRole.ADMIN if normalize_email(email) in config.ADMIN_EMAILS else UserRole.USER


async def find_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def register_profile(
    session: AsyncSession,
    email: str,
    password: str,
    name: str,
) -> User:
    """Create an email/password account. Raises DuplicateEmailError."""
    if await find_by_email(session, email):
        raise DuplicateEmailError(f"An account with {email} already exists")
    
    user = User(
        email=normalize_email(email),
        name=default_display_name(email, name),
        role=initial_role(email),
        password_hash=hash_password(password),
    )
    session.add(user)
    await session.commit()
    logger.info(f"Registered new user {user.email} ({user.role.value})")
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, else None."""
    user = await find_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {normalize_email(email)}")
        return None
    return user


async def get_or_create_profile(
    session: AsyncSession,
    email: str,
    name: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> User:
    """Fetch the profile for a federated sign-in, creating it on first login."""
    user = await find_by_email(session, email)
    if user is not None:
        if photo_url and not user.photo_url:
            user.photo_url = photo_url
            await session.commit()
        return user
    
    user = User(
        email=normalize_email(email),
        name=default_display_name(email, name),
        photo_url=photo_url,
        role=initial_role(email),
    )
    session.add(user)
    await session.commit()
    logger.info(f"Created profile on first sign-in: {user.email}")
    return user
