"""Omifem database models."""

from app.models.base import Base
from app.models.user import User, UserRole
from app.models.style import Style, StyleLike, StyleCategory, StyleSource
from app.models.feedback import Feedback

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Style",
    "StyleLike",
    "StyleCategory",
    "StyleSource",
    "Feedback",
]
