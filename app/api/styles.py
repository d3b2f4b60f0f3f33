"""Catalog API: paging, filtered listing, detail, likes and related styles."""

import logging
import uuid
from typing import Annotated, List, Optional

from litestar import Controller, get, post
from litestar.params import Parameter
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.api.schemas import StyleResponse
from app.auth.session import require_user_guard
from app.catalog.detail import get_style, related_styles, toggle_like
from app.catalog.listing import DatabaseStyleSource, build_listing
from app.models import User

logger = logging.getLogger("Omifem.styles")


# --- Response Schemas ---

class StylePage(BaseModel):
    """One newest-first page and the cursor for the next one."""
    items: List[StyleResponse]
    next_cursor: Optional[str]


class CatalogResponse(BaseModel):
    """Visible window of the filtered catalog."""
    items: List[StyleResponse]
    has_more: bool
    visible_count: int
    total_matching: int
    filters_active: bool
    category: str
    q: str
    sort: str


class StyleDetailResponse(BaseModel):
    """A style plus whether the viewer likes it."""
    style: StyleResponse
    liked: bool


class LikeResponse(BaseModel):
    """State of the liker set after a toggle."""
    success: bool
    message: str
    liked: bool
    like_count: int


# --- Controller ---

class StylesController(Controller):
    """API endpoints for browsing the catalog."""
    
    path = "/api/styles"
    tags = ["styles"]
    
    @get("/")
    async def list_page(
        self,
        session: AsyncSession,
        limit: Annotated[int, Parameter(ge=1, le=50)] = config.CATALOG_PAGE_SIZE,
        after: Optional[str] = None,
    ) -> StylePage:
        """Newest-first page after an optional cursor."""
        styles = await DatabaseStyleSource(session).fetch_page(limit, after)
        next_cursor = str(styles[-1].id) if len(styles) == limit else None
        return StylePage(
            items=[StyleResponse.from_style(s) for s in styles],
            next_cursor=next_cursor,
        )
    
    @get("/catalog")
    async def catalog(
        self,
        session: AsyncSession,
        category: Optional[str] = None,
        q: Optional[str] = None,
        sort: Optional[str] = None,
        pages: Annotated[int, Parameter(ge=1, le=100)] = 1,
    ) -> CatalogResponse:
        """Filtered, sorted listing grown to ``pages`` pages."""
        listing = await build_listing(
            session,
            category=category,
            query=q,
            sort=sort,
            pages=pages,
            page_size=config.CATALOG_PAGE_SIZE,
            prefetch=config.CATALOG_PREFETCH,
        )
        return CatalogResponse(
            items=[StyleResponse.from_style(s) for s in listing.visible],
            has_more=listing.has_more,
            visible_count=listing.visible_count,
            total_matching=len(listing.filtered),
            filters_active=listing.filters.active,
            category=listing.filters.category,
            q=listing.filters.query,
            sort=listing.filters.sort.value,
        )
    
    @get("/{style_id:uuid}")
    async def get_style_detail(
        self,
        style_id: uuid.UUID,
        session: AsyncSession,
        current_user: Optional[User],
    ) -> StyleDetailResponse:
        """One style with the viewer's like flag."""
        style = await get_style(session, style_id)
        return StyleDetailResponse(
            style=StyleResponse.from_style(style),
            liked=style.is_liked_by(current_user.id if current_user else None),
        )
    
    @post("/{style_id:uuid}/like", guards=[require_user_guard], status_code=200)
    async def like(
        self,
        style_id: uuid.UUID,
        session: AsyncSession,
        current_user: Optional[User],
    ) -> LikeResponse:
        """Toggle the current user's like."""
        outcome = await toggle_like(session, style_id, current_user.id)
        logger.info(f"Like toggled on {style_id} by {current_user.email}: liked={outcome.liked}")
        return LikeResponse(
            success=outcome.success,
            message=outcome.message,
            liked=outcome.liked,
            like_count=outcome.like_count,
        )
    
    @get("/{style_id:uuid}/related")
    async def related(
        self,
        style_id: uuid.UUID,
        session: AsyncSession,
    ) -> List[StyleResponse]:
        """Up to three styles to show alongside this one."""
        style = await get_style(session, style_id)
        return [StyleResponse.from_style(s) for s in await related_styles(session, style)]
