"""Feedback API endpoints."""

import logging
from typing import Annotated, List, Optional

from litestar import Controller, get, post
from litestar.params import Parameter
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import FeedbackResponse, MutationResult, feedback_response
from app.auth.session import require_user_guard
from app.models import Feedback, User
from app.utils.logging import error_log

logger = logging.getLogger("Omifem.feedback")

PUBLIC_FEED_LIMIT = 6


# --- Request Schemas ---

class FeedbackRequest(BaseModel):
    """Request to submit a review."""
    comment: str = Field(..., description="Review text")
    rating: int = Field(..., ge=1, le=5, strict=True, description="Star rating")

    @field_validator("comment")
    @classmethod
    def comment_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Comment must be at least 10 characters")
        if len(value) > 500:
            raise ValueError("Comment must be at most 500 characters")
        return value


async def approved_feedback(session: AsyncSession, limit: int = PUBLIC_FEED_LIMIT) -> List[Feedback]:
    """Public feed: approved reviews only, newest first."""
    result = await session.execute(
        select(Feedback)
        .where(Feedback.approved.is_(True))
        .order_by(Feedback.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


# --- Controller ---

class FeedbackController(Controller):
    """API endpoints for customer reviews."""
    
    path = "/api/feedback"
    tags = ["feedback"]
    
    @get("/")
    async def list_feedback(
        self,
        session: AsyncSession,
        limit: Annotated[int, Parameter(ge=1, le=50)] = PUBLIC_FEED_LIMIT,
    ) -> List[FeedbackResponse]:
        """Approved reviews for public pages."""
        return [FeedbackResponse.model_validate(f) for f in await approved_feedback(session, limit)]
    
    @post("/", guards=[require_user_guard])
    async def submit_feedback(
        self,
        data: FeedbackRequest,
        session: AsyncSession,
        current_user: Optional[User],
    ) -> MutationResult[FeedbackResponse]:
        """Submit a review; admin reviews are published immediately."""
        feedback = Feedback(
            user_id=current_user.id,
            user_name=current_user.name,
            user_photo=current_user.photo_url,
            comment=data.comment,
            rating=data.rating,
            approved=current_user.is_admin,
        )
        session.add(feedback)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            error_log("Failed to submit feedback", exc=e, context={"user": current_user.email}, area="feedback")
            return MutationResult[FeedbackResponse](
                success=False,
                message="Failed to submit feedback. Please try again.",
            )
        
        logger.info(f"Feedback submitted by {current_user.email} (approved={feedback.approved})")
        message = (
            "Feedback submitted!"
            if feedback.approved
            else "Thank you for your feedback! It will be visible after approval."
        )
        return MutationResult[FeedbackResponse](
            success=True,
            message=message,
            record=feedback_response(feedback),
        )
