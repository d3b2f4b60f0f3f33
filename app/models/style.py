"""Catalog style models."""

import enum
import uuid
from typing import List, Optional

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base


class StyleCategory(str, enum.Enum):
    """Closed set of catalog categories."""
    CASUAL = "casual"
    OFFICIAL = "official"
    TRADITIONAL = "traditional"
    PARTY = "party"
    NATIVE = "native"


class StyleSource(str, enum.Enum):
    """Where a catalog entry came from."""
    UPLOAD = "upload"        # Uploaded by an admin
    PINTEREST = "pinterest"  # Imported from an external board


class Style(Base):
    """An outfit design in the catalog."""
    
    __tablename__ = "styles"
    
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    category: Mapped[StyleCategory] = mapped_column(
        Enum(StyleCategory),
        default=StyleCategory.CASUAL,
        index=True,
    )
    
    # Naira amounts; tailoring only vs. fabric included
    price_without_fabrics: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    price_with_fabrics: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    delivery_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    source: Mapped[StyleSource] = mapped_column(
        Enum(StyleSource),
        default=StyleSource.UPLOAD,
    )
    
    # Liker set, always loaded with the style
    likes: Mapped[List["StyleLike"]] = relationship(
        "StyleLike",
        back_populates="style",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    
    @property
    def liker_ids(self) -> List[str]:
        return [str(like.user_id) for like in self.likes]
    
    @property
    def like_count(self) -> int:
        return len(self.likes)
    
    def is_liked_by(self, user_id: Optional[uuid.UUID]) -> bool:
        if user_id is None:
            return False
        return any(like.user_id == user_id for like in self.likes)
    
    def __repr__(self) -> str:
        return f"<Style {self.title} ({self.category.value})>"


class StyleLike(Base):
    """Membership of one user in a style's liker set."""
    
    __tablename__ = "style_likes"
    __table_args__ = (
        UniqueConstraint("style_id", "user_id", name="uq_style_likes_style_user"),
    )
    
    style_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("styles.id", ondelete="CASCADE"),
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    
    style: Mapped["Style"] = relationship("Style", back_populates="likes")
