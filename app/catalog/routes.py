"""Catalog pages: the filtered listing and one style's detail."""

import uuid
from typing import Annotated, List, Optional

from litestar import Request, get
from litestar.params import Parameter
from litestar.response import Template
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.catalog.detail import StyleView, get_style, parse_price_mode, related_styles
from app.catalog.listing import SortOrder, build_listing
from app.models import StyleCategory, User
from app.utils import get_base_path
from app.utils.contact import PriceMode, style_order_link
from app.utils.logging import error_log


@get("/styles")
async def styles_page(
    request: Request,
    session: AsyncSession,
    current_user: Optional[User],
    category: Optional[str] = None,
    q: Optional[str] = None,
    sort: Optional[str] = None,
    pages: Annotated[int, Parameter(ge=1, le=100)] = 1,
) -> Template:
    """Catalog grid. ``pages`` replays "load more" so the URL is shareable."""
    listing = await build_listing(
        session,
        category=category,
        query=q,
        sort=sort,
        pages=pages,
        page_size=config.CATALOG_PAGE_SIZE,
        prefetch=config.CATALOG_PREFETCH,
    )
    viewer_id = current_user.id if current_user else None
    return Template(
        template_name="catalog/list.html",
        context={
            "base_path": get_base_path(request),
            "current_user": current_user,
            "styles": [StyleView.from_style(s, viewer_id) for s in listing.visible],
            "listing": listing,
            "filters": listing.filters,
            "categories": list(StyleCategory),
            "sort_orders": list(SortOrder),
            "next_pages": pages + 1,
        },
    )


@get("/styles/{style_id:uuid}")
async def style_page(
    request: Request,
    style_id: uuid.UUID,
    session: AsyncSession,
    current_user: Optional[User],
    mode: Optional[str] = None,
) -> Template:
    """One style with price toggle, order link and related styles."""
    style = await get_style(session, style_id)
    viewer_id = current_user.id if current_user else None
    view = StyleView.from_style(style, viewer_id)
    price_mode = parse_price_mode(mode)
    related: List[StyleView] = []
    related_error = None
    try:
        related = [StyleView.from_style(s, viewer_id) for s in await related_styles(session, style)]
    except SQLAlchemyError as e:
        error_log("Failed to load related styles", exc=e, context={"style_id": style_id}, area="catalog")
        await session.rollback()
        related_error = "Related styles could not be loaded right now."

    return Template(
        template_name="catalog/detail.html",
        context={
            "base_path": get_base_path(request),
            "current_user": current_user,
            "style": view,
            "price_mode": price_mode,
            "price_modes": list(PriceMode),
            "price": view.price_for(price_mode),
            "order_link": style_order_link(view, price_mode, page_url=str(request.url)),
            "related": related,
            "related_error": related_error,
        },
    )


routes = [styles_page, style_page]
