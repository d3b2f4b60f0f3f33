"""Admin API endpoints."""

import logging
import uuid
from dataclasses import dataclass
from typing import Annotated, Any, Callable, List, Optional, Type

from litestar import Controller, Request, delete, get, patch, post
from litestar.datastructures import UploadFile
from litestar.enums import RequestEncodingType
from litestar.exceptions import HTTPException, NotFoundException, ValidationException
from litestar.params import Body
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.admin.analytics import (
    DashboardAnalytics,
    DashboardLoadError,
    compute_analytics,
    load_dashboard,
)
from app.api.schemas import (
    FeedbackResponse,
    MutationResult,
    StyleResponse,
    UserResponse,
    feedback_response,
    style_response,
    user_response,
)
from app.auth.session import require_admin_guard
from app.models import Base, Feedback, Style, StyleCategory, StyleLike, StyleSource, User, UserRole
from app.services.images import ImageUploadError, upload_image
from app.utils.contact import DEFAULT_DELIVERY_TIME
from app.utils.logging import error_log

logger = logging.getLogger("Omifem.admin")


# --- Request Schemas ---

class RoleUpdateRequest(BaseModel):
    """Promote or demote a user."""
    role: UserRole


class StyleFields(BaseModel):
    """Validation shared by style creation and editing."""
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10)
    category: Optional[StyleCategory] = None
    price_without_fabrics: Optional[int] = Field(default=None, ge=0)
    price_with_fabrics: Optional[int] = Field(default=None, ge=0)
    delivery_time: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [tag.strip() for tag in value if tag and tag.strip()]


class StyleCreate(StyleFields):
    """A new style; title, description and category are required."""
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    category: StyleCategory


@dataclass
class StyleUploadForm:
    """Multipart form posted by the upload panel."""
    title: str
    description: str
    category: str
    image: UploadFile
    price_without_fabrics: Optional[str] = None
    price_with_fabrics: Optional[str] = None
    delivery_time: Optional[str] = None
    tags: Optional[str] = None


class DashboardResponse(BaseModel):
    """Analytics plus the full record lists, newest first."""
    analytics: DashboardAnalytics
    users: List[UserResponse]
    styles: List[StyleResponse]
    feedbacks: List[FeedbackResponse]


# --- Helper Functions ---

def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma separated tag field."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def validation_errors(exc: ValidationError) -> List[dict]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def style_create_from_form(form: StyleUploadForm) -> StyleCreate:
    try:
        return StyleCreate(
            title=form.title.strip(),
            description=form.description.strip(),
            category=form.category.strip().lower(),
            price_without_fabrics=_blank_to_none(form.price_without_fabrics),
            price_with_fabrics=_blank_to_none(form.price_with_fabrics),
            delivery_time=_blank_to_none(form.delivery_time),
            tags=parse_tags(form.tags),
        )
    except ValidationError as e:
        raise ValidationException(detail="Invalid style details", extra=validation_errors(e))


def require_confirmation(confirm: bool, what: str) -> None:
    """Destructive actions need an explicit confirm=true."""
    if not confirm:
        raise ValidationException(f"Deleting this {what} must be confirmed")


async def get_or_404(session: AsyncSession, model: Type[Base], record_id: uuid.UUID, label: str) -> Any:
    record = await session.get(model, record_id)
    if record is None:
        raise NotFoundException(f"{label} not found")
    return record


async def reconcile_failure(
    session: AsyncSession,
    model: Type[Base],
    record_id: uuid.UUID,
    to_response: Callable[[Any], Any],
    response_type: Type[BaseModel],
    message: str,
    exc: Exception,
) -> MutationResult:
    """Roll back a failed write and return the record as the database has it."""
    await session.rollback()
    error_log(message, exc=exc, context={"model": model.__name__, "id": record_id}, area="admin")
    current = await session.get(model, record_id, populate_existing=True)
    return MutationResult[response_type](success=False, message=message, record=to_response(current))


# --- Controller ---

class AdminController(Controller):
    """API endpoints for the admin dashboard."""

    path = "/api/admin"
    tags = ["admin"]
    guards = [require_admin_guard]

    @get("/dashboard")
    async def get_dashboard(self, request: Request) -> DashboardResponse:
        """Analytics and every record, fetched in parallel."""
        try:
            data = await load_dashboard(request.app.state.session_maker)
        except DashboardLoadError as e:
            raise HTTPException(detail=str(e), status_code=HTTP_500_INTERNAL_SERVER_ERROR)

        return DashboardResponse(
            analytics=compute_analytics(data.users, data.styles, data.feedbacks),
            users=[UserResponse.model_validate(u) for u in data.users],
            styles=[StyleResponse.from_style(s) for s in data.styles],
            feedbacks=[FeedbackResponse.model_validate(f) for f in data.feedbacks],
        )

    # --- Users ---

    @patch("/users/{user_id:uuid}/role")
    async def update_role(
        self,
        user_id: uuid.UUID,
        data: RoleUpdateRequest,
        session: AsyncSession,
    ) -> MutationResult[UserResponse]:
        """Promote or demote a user."""
        user = await get_or_404(session, User, user_id, "User")
        user.role = data.role
        try:
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, User, user_id, user_response, UserResponse, "Failed to update role", e
            )

        logger.info(f"Role of {user.email} set to {data.role.value}")
        return MutationResult[UserResponse](
            success=True,
            message=f"{user.name} is now {data.role.value}",
            record=user_response(user),
        )

    @delete("/users/{user_id:uuid}", status_code=200)
    async def delete_user(
        self,
        user_id: uuid.UUID,
        session: AsyncSession,
        confirm: bool = False,
    ) -> MutationResult[UserResponse]:
        """Delete a user profile and its likes."""
        require_confirmation(confirm, "user")
        user = await get_or_404(session, User, user_id, "User")
        email = user.email
        try:
            await session.execute(sql_delete(StyleLike).where(StyleLike.user_id == user_id))
            await session.execute(sql_delete(User).where(User.id == user_id))
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, User, user_id, user_response, UserResponse, "Failed to delete user", e
            )

        logger.info(f"Deleted user {email}")
        return MutationResult[UserResponse](success=True, message="User deleted successfully")

    # --- Styles ---

    @post("/styles")
    async def upload_style(
        self,
        data: Annotated[StyleUploadForm, Body(media_type=RequestEncodingType.MULTI_PART)],
        session: AsyncSession,
    ) -> MutationResult[StyleResponse]:
        """Create a style from the upload form (image first, then the record)."""
        fields = style_create_from_form(data)
        content = await data.image.read()

        try:
            image_url = await upload_image(content, data.image.filename, data.image.content_type)
        except ImageUploadError as e:
            logger.error(f"Style upload aborted: {e}")
            return MutationResult[StyleResponse](success=False, message=str(e))

        style = Style(
            title=fields.title,
            description=fields.description,
            category=fields.category,
            image_url=image_url,
            price_without_fabrics=fields.price_without_fabrics,
            price_with_fabrics=fields.price_with_fabrics,
            delivery_time=fields.delivery_time or DEFAULT_DELIVERY_TIME,
            tags=fields.tags or [],
            source=StyleSource.UPLOAD,
        )
        session.add(style)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            error_log("Failed to save style", exc=e, context={"title": fields.title}, area="admin")
            return MutationResult[StyleResponse](success=False, message="Failed to upload style")

        # Reload to pick up the (empty) liker set
        await session.refresh(style, attribute_names=["likes"])
        logger.info(f"Style uploaded: {style.title} ({style.category.value})")
        return MutationResult[StyleResponse](
            success=True,
            message="Style uploaded successfully!",
            record=style_response(style),
        )

    @patch("/styles/{style_id:uuid}")
    async def update_style(
        self,
        style_id: uuid.UUID,
        data: StyleFields,
        session: AsyncSession,
    ) -> MutationResult[StyleResponse]:
        """Edit any subset of a style's fields."""
        style = await get_or_404(session, Style, style_id, "Style")
        changes = data.model_dump(exclude_unset=True)
        for name, value in changes.items():
            setattr(style, name, value)
        try:
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, Style, style_id, style_response, StyleResponse, "Failed to update style", e
            )

        logger.info(f"Style {style_id} updated: {sorted(changes)}")
        return MutationResult[StyleResponse](
            success=True,
            message="Style updated successfully",
            record=style_response(style),
        )

    @delete("/styles/{style_id:uuid}", status_code=200)
    async def delete_style(
        self,
        style_id: uuid.UUID,
        session: AsyncSession,
        confirm: bool = False,
    ) -> MutationResult[StyleResponse]:
        """Delete a style and its likes."""
        require_confirmation(confirm, "style")
        await get_or_404(session, Style, style_id, "Style")
        try:
            await session.execute(sql_delete(StyleLike).where(StyleLike.style_id == style_id))
            await session.execute(sql_delete(Style).where(Style.id == style_id))
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, Style, style_id, style_response, StyleResponse, "Failed to delete style", e
            )

        logger.info(f"Deleted style {style_id}")
        return MutationResult[StyleResponse](success=True, message="Style deleted successfully")

    # --- Feedback ---

    @patch("/feedback/{feedback_id:uuid}/approval")
    async def toggle_approval(
        self,
        feedback_id: uuid.UUID,
        session: AsyncSession,
    ) -> MutationResult[FeedbackResponse]:
        """Approve a pending review, or withdraw an approved one."""
        feedback = await get_or_404(session, Feedback, feedback_id, "Feedback")
        feedback.approved = not feedback.approved
        try:
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, Feedback, feedback_id, feedback_response, FeedbackResponse,
                "Failed to update feedback", e,
            )

        logger.info(f"Feedback {feedback_id} approved={feedback.approved}")
        return MutationResult[FeedbackResponse](
            success=True,
            message="Feedback approved" if feedback.approved else "Feedback hidden",
            record=feedback_response(feedback),
        )

    @delete("/feedback/{feedback_id:uuid}", status_code=200)
    async def delete_feedback(
        self,
        feedback_id: uuid.UUID,
        session: AsyncSession,
        confirm: bool = False,
    ) -> MutationResult[FeedbackResponse]:
        """Delete a review."""
        require_confirmation(confirm, "feedback")
        await get_or_404(session, Feedback, feedback_id, "Feedback")
        try:
            await session.execute(sql_delete(Feedback).where(Feedback.id == feedback_id))
            await session.commit()
        except SQLAlchemyError as e:
            return await reconcile_failure(
                session, Feedback, feedback_id, feedback_response, FeedbackResponse,
                "Failed to delete feedback", e,
            )

        logger.info(f"Deleted feedback {feedback_id}")
        return MutationResult[FeedbackResponse](success=True, message="Feedback deleted successfully")
