"""Response schemas shared by the API controllers."""

import uuid
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from app.models import Feedback, Style, StyleCategory, StyleSource, User, UserRole

RecordT = TypeVar("RecordT")


class UserResponse(BaseModel):
    """User profile response."""
    id: uuid.UUID
    email: str
    name: str
    photo_url: Optional[str]
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class StyleResponse(BaseModel):
    """Catalog style response."""
    id: uuid.UUID
    title: str
    description: str
    image_url: Optional[str]
    category: StyleCategory
    price_without_fabrics: Optional[int]
    price_with_fabrics: Optional[int]
    delivery_time: Optional[str]
    likes: List[str]
    like_count: int
    tags: List[str]
    source: StyleSource
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_style(cls, style: Style) -> "StyleResponse":
        return cls(
            id=style.id,
            title=style.title,
            description=style.description or "",
            image_url=style.image_url,
            category=style.category,
            price_without_fabrics=style.price_without_fabrics,
            price_with_fabrics=style.price_with_fabrics,
            delivery_time=style.delivery_time,
            likes=style.liker_ids,
            like_count=style.like_count,
            tags=list(style.tags or []),
            source=style.source,
            created_at=style.created_at,
            updated_at=style.updated_at,
        )


class FeedbackResponse(BaseModel):
    """Feedback response."""
    id: uuid.UUID
    user_id: Optional[uuid.UUID]
    user_name: str
    user_photo: Optional[str]
    comment: str
    rating: int
    approved: bool
    created_at: datetime

    class Config:
        from_attributes = True


class MutationResult(BaseModel, Generic[RecordT]):
    """Outcome of a write.

    ``record`` is the server's current view of the affected record after the
    write, or after the rollback when the write failed, so callers can
    replace their local copy instead of guessing. It is None when the record
    no longer exists.
    """
    success: bool
    message: str
    record: Optional[RecordT] = None


def user_response(user: Optional[User]) -> Optional[UserResponse]:
    return UserResponse.model_validate(user) if user else None


def feedback_response(feedback: Optional[Feedback]) -> Optional[FeedbackResponse]:
    return FeedbackResponse.model_validate(feedback) if feedback else None


def style_response(style: Optional[Style]) -> Optional[StyleResponse]:
    return StyleResponse.from_style(style) if style else None
