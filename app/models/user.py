"""User profile model."""

import enum
from typing import Optional

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class UserRole(str, enum.Enum):
    """Authorization role. The only signal used for admin gating."""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """A signed-in customer or administrator."""
    
    __tablename__ = "users"
    
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    photo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        default=UserRole.USER,
    )
    
    # Federated accounts have no local password
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
    
    @property
    def initial(self) -> str:
        """First letter of the display name, for avatar fallbacks."""
        return (self.name or self.email or "?")[:1].upper()
    
    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
