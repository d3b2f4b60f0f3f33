"""Style detail: defaulted view, like toggling and related styles."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from litestar.exceptions import NotFoundException
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.models import Style, StyleCategory, StyleLike, StyleSource
from app.utils.contact import DEFAULT_DELIVERY_TIME, PriceMode, displayed_price
from app.utils.dates import as_utc
from app.utils.logging import error_log

logger = logging.getLogger("Omifem.catalog")

RELATED_LIMIT = 3
RELATED_BATCH = 6


@dataclass
class StyleView:
    """A style with every optional field filled in for display."""
    id: uuid.UUID
    title: str
    description: str
    image_url: str
    category: StyleCategory
    price_without_fabrics: Optional[int]
    price_with_fabrics: Optional[int]
    delivery_time: str
    likes: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    source: StyleSource = StyleSource.UPLOAD
    created_at: Optional[datetime] = None
    liked: bool = False

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def price_for(self, mode: PriceMode) -> Optional[int]:
        return displayed_price(self, mode)

    @classmethod
    def from_style(cls, style: Style, viewer_id: Optional[uuid.UUID] = None) -> "StyleView":
        likes = [uid for uid in (style.liker_ids or []) if uid]
        return cls(
            id=style.id,
            title=style.title or "Untitled Style",
            description=style.description or "No description available",
            image_url=style.image_url or config.PLACEHOLDER_IMAGE_URL,
            category=style.category or StyleCategory.CASUAL,
            price_without_fabrics=style.price_without_fabrics,
            price_with_fabrics=style.price_with_fabrics,
            delivery_time=style.delivery_time or DEFAULT_DELIVERY_TIME,
            likes=likes,
            tags=[t for t in (style.tags or []) if t],
            source=style.source or StyleSource.UPLOAD,
            created_at=as_utc(style.created_at),
            liked=viewer_id is not None and str(viewer_id) in likes,
        )


@dataclass
class LikeToggle:
    """Result of a like/unlike, reflecting what the database holds afterwards."""
    success: bool
    liked: bool
    like_count: int
    message: str


def parse_price_mode(value: Optional[str]) -> PriceMode:
    try:
        return PriceMode((value or PriceMode.FABRIC.value).lower())
    except ValueError:
        return PriceMode.FABRIC


async def get_style(session: AsyncSession, style_id: uuid.UUID, refresh: bool = False) -> Style:
    """Fetch one style with its liker set. Raises NotFoundException."""
    stmt = select(Style).where(Style.id == style_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await session.execute(stmt)
    style = result.scalar_one_or_none()
    if not style:
        raise NotFoundException("Style not found")
    return style


async def toggle_like(session: AsyncSession, style_id: uuid.UUID, user_id: uuid.UUID) -> LikeToggle:
    """Add or remove ``user_id`` in the style's liker set with one write."""
    await get_style(session, style_id)

    existing = await session.scalar(
        select(StyleLike.id).where(StyleLike.style_id == style_id, StyleLike.user_id == user_id)
    )
    success = True
    if existing:
        message = "Removed from likes"
    else:
        message = "Added to likes"

    try:
        if existing:
            await session.execute(
                delete(StyleLike).where(StyleLike.style_id == style_id, StyleLike.user_id == user_id)
            )
        else:
            session.add(StyleLike(style_id=style_id, user_id=user_id))
        await session.commit()
    except IntegrityError:
        # A concurrent request liked it first; the set already holds the user
        await session.rollback()
        logger.info(f"Duplicate like ignored for style {style_id} by {user_id}")
    except SQLAlchemyError as e:
        await session.rollback()
        error_log("Failed to update like", exc=e, context={"style_id": style_id, "user_id": user_id}, area="catalog")
        success = False
        message = "Failed to update like. Please try again."

    # Report what the database holds, not what we attempted
    style = await get_style(session, style_id, refresh=True)
    return LikeToggle(
        success=success,
        liked=style.is_liked_by(user_id),
        like_count=style.like_count,
        message=message,
    )


def pick_related(
    current_id: uuid.UUID,
    same_category: Sequence[Style],
    general: Sequence[Style],
    limit: int = RELATED_LIMIT,
) -> List[Style]:
    """Same-category styles first, backfilled from ``general`` when short,
    then ranked by like count."""
    chosen: List[Style] = []
    seen = {current_id}
    for style in same_category:
        if style.id not in seen:
            chosen.append(style)
            seen.add(style.id)

    if len(chosen) < limit:
        for style in general:
            if style.id not in seen:
                chosen.append(style)
                seen.add(style.id)

    return sorted(chosen, key=lambda s: s.like_count, reverse=True)[:limit]


async def related_styles(
    session: AsyncSession,
    style: Style,
    limit: int = RELATED_LIMIT,
    batch: int = RELATED_BATCH,
) -> List[Style]:
    """Up to ``limit`` styles to show next to ``style``."""
    result = await session.execute(
        select(Style)
        .where(Style.category == style.category, Style.id != style.id)
        .order_by(Style.created_at.desc())
        .limit(batch)
    )
    same_category = list(result.scalars().all())

    general: List[Style] = []
    if len(same_category) < limit:
        like_counts = (
            select(StyleLike.style_id, func.count(StyleLike.id).label("like_count"))
            .group_by(StyleLike.style_id)
            .subquery()
        )
        result = await session.execute(
            select(Style)
            .outerjoin(like_counts, like_counts.c.style_id == Style.id)
            .where(Style.id != style.id)
            .order_by(func.coalesce(like_counts.c.like_count, 0).desc(), Style.created_at.desc())
            .limit(batch * 2)
        )
        general = list(result.scalars().all())

    return pick_related(style.id, same_category, general, limit)
