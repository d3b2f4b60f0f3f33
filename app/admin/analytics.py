"""Dashboard figures computed from the three collections."""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Sequence

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.schemas import StyleResponse, UserResponse
from app.models import Feedback, Style, User
from app.utils.dates import as_utc

logger = logging.getLogger("Omifem.admin")

TOP_N = 5


class DashboardAnalytics(BaseModel):
    """Fixed-shape analytics panel."""
    total_users: int
    total_styles: int
    total_feedback: int
    total_likes: int
    pending_feedback: int
    recent_signups: List[UserResponse]
    popular_styles: List[StyleResponse]


@dataclass
class DashboardData:
    """Everything the dashboard shows, newest first."""
    users: List[User]
    styles: List[Style]
    feedbacks: List[Feedback]


class DashboardLoadError(RuntimeError):
    """One of the dashboard queries failed; no partial data is returned."""


def compute_analytics(
    users: Sequence[User],
    styles: Sequence[Style],
    feedbacks: Sequence[Feedback],
    top_n: int = TOP_N,
) -> DashboardAnalytics:
    """Pure reduction over already fetched records."""
    recent = sorted(users, key=lambda u: as_utc(u.created_at), reverse=True)[:top_n]
    popular = sorted(styles, key=lambda s: s.like_count, reverse=True)[:top_n]
    return DashboardAnalytics(
        total_users=len(users),
        total_styles=len(styles),
        total_feedback=len(feedbacks),
        total_likes=sum(s.like_count for s in styles),
        pending_feedback=sum(1 for f in feedbacks if not f.approved),
        recent_signups=[UserResponse.model_validate(u) for u in recent],
        popular_styles=[StyleResponse.from_style(s) for s in popular],
    )


async def _fetch_all(session_maker: async_sessionmaker[AsyncSession], model) -> list:
    async with session_maker() as session:
        result = await session.execute(select(model).order_by(model.created_at.desc()))
        return list(result.scalars().all())


async def load_dashboard(session_maker: async_sessionmaker[AsyncSession]) -> DashboardData:
    """Fetch users, styles and feedback concurrently on separate sessions."""
    try:
        users, styles, feedbacks = await asyncio.gather(
            _fetch_all(session_maker, User),
            _fetch_all(session_maker, Style),
            _fetch_all(session_maker, Feedback),
        )
    except Exception as e:
        logger.exception("Error fetching admin data")
        raise DashboardLoadError("Failed to load admin data") from e
    logger.debug(f"Dashboard loaded: {len(users)} users, {len(styles)} styles, {len(feedbacks)} feedback")
    return DashboardData(users=users, styles=styles, feedbacks=feedbacks)
