"""Customer feedback model."""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Feedback(Base):
    """A customer review.
    
    The author's name and photo are copied at write time and are not kept in
    sync with later profile edits.
    """
    
    __tablename__ = "feedbacks"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedbacks_rating_range"),
    )
    
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        index=True,
    )
    user_name: Mapped[str] = mapped_column(String(200), nullable=False)
    user_photo: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    approved: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)
    
    @property
    def user_initial(self) -> str:
        return (self.user_name or "?")[:1].upper()
    
    def __repr__(self) -> str:
        return f"<Feedback {self.user_name} {self.rating}/5 ({'approved' if self.approved else 'pending'})>"
