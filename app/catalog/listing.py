"""Catalog listing: filtering, sorting and the growing visible window.

The listing holds a prefix of the catalog fetched newest-first, and the
visible window grows a page at a time. The unfiltered newest-first view
goes back to the store for more records, continuing after the cursor of
the last fetch. Filters and sort orders need the whole catalog held
locally; ``load_remaining`` fetches the rest before they are applied.
"""

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Style, StyleCategory
from app.utils.dates import as_utc
from app.utils.logging import error_log

logger = logging.getLogger("Omifem.catalog")

ALL_CATEGORIES = "all"


class SortOrder(str, enum.Enum):
    """Catalog sort orders."""
    NEWEST = "newest"    # created_at, newest first
    POPULAR = "popular"  # like count, most liked first


class StylePageSource(Protocol):
    """Anything that can hand out newest-first pages of styles."""

    async def fetch_page(self, limit: int, after: Optional[str] = None) -> Sequence[Style]:
        ...


@dataclass
class ListingFilters:
    """Current filter and sort selection."""
    category: str = ALL_CATEGORIES
    query: str = ""
    sort: SortOrder = SortOrder.NEWEST

    @property
    def active(self) -> bool:
        return (
            self.category != ALL_CATEGORIES
            or bool(self.query.strip())
            or self.sort != SortOrder.NEWEST
        )


def parse_category(value: Optional[str]) -> str:
    """Normalize a category selection; unknown values mean "all"."""
    if not value:
        return ALL_CATEGORIES
    value = value.strip().lower()
    if value in {c.value for c in StyleCategory}:
        return value
    return ALL_CATEGORIES


def parse_sort(value: Optional[str]) -> SortOrder:
    try:
        return SortOrder((value or SortOrder.NEWEST.value).strip().lower())
    except ValueError:
        return SortOrder.NEWEST


def matches_category(style: Style, category: str) -> bool:
    if category == ALL_CATEGORIES:
        return True
    return style.category.value == category


def matches_query(style: Style, query: str) -> bool:
    """Case-insensitive substring match over title, description and tags."""
    needle = query.strip().lower()
    if not needle:
        return True
    return (
        needle in (style.title or "").lower()
        or needle in (style.description or "").lower()
        or any(needle in tag.lower() for tag in (style.tags or []))
    )


def filter_styles(styles: Sequence[Style], category: str = ALL_CATEGORIES, query: str = "") -> List[Style]:
    return [s for s in styles if matches_category(s, category) and matches_query(s, query)]


def sort_styles(styles: Sequence[Style], order: SortOrder) -> List[Style]:
    """Stable re-ordering of already fetched styles."""
    if order == SortOrder.POPULAR:
        return sorted(styles, key=lambda s: s.like_count, reverse=True)
    return sorted(styles, key=lambda s: as_utc(s.created_at), reverse=True)


class CatalogListing:
    """Paginated, filterable view over the catalog."""

    def __init__(
        self,
        source: StylePageSource,
        page_size: int = 9,
        prefetch: Optional[int] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.source = source
        self.page_size = page_size
        self.prefetch = max(prefetch or page_size, page_size)
        self.filters = ListingFilters()
        self.styles: List[Style] = []
        self.cursor: Optional[str] = None
        self.store_exhausted = False
        self.visible_count = 0
        self.error: Optional[str] = None
        self._filtered: List[Style] = []
        self._loading = False

    # --- Views ---

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def filtered(self) -> List[Style]:
        return list(self._filtered)

    @property
    def visible(self) -> List[Style]:
        return self._filtered[:self.visible_count]

    @property
    def is_empty(self) -> bool:
        return not self._filtered

    @property
    def has_more(self) -> bool:
        if self.visible_count < len(self._filtered):
            return True
        if self.filters.active:
            return False
        return not self.store_exhausted

    # --- Operations ---

    async def load_initial(self) -> None:
        """Fetch the first prefix of the catalog and show the first page."""
        if self._loading:
            return
        self._loading = True
        try:
            page = await self.source.fetch_page(self.prefetch, None)
            self.styles = list(page)
            self.cursor = str(self.styles[-1].id) if self.styles else None
            self.store_exhausted = len(page) < self.prefetch
            self.error = None
            logger.debug(f"Loaded {len(self.styles)} styles (exhausted={self.store_exhausted})")
        except Exception as e:
            error_log("Failed to load styles", exc=e, area="catalog")
            self.styles = []
            self.cursor = None
            self.store_exhausted = True
            self.error = "Failed to load styles"
        finally:
            self._loading = False
        self._reset_window()

    def apply_filters(
        self,
        category: Optional[str] = None,
        query: Optional[str] = None,
        sort: Optional[SortOrder] = None,
    ) -> None:
        """Change filters/sort; the window goes back to the first page."""
        if category is not None:
            self.filters.category = parse_category(category)
        if query is not None:
            self.filters.query = query
        if sort is not None:
            self.filters.sort = parse_sort(sort)
        self._reset_window()

    def clear_filters(self) -> None:
        self.filters = ListingFilters()
        self._reset_window()

    async def load_more(self) -> bool:
        """Grow the window by one page. Returns False when nothing changed.

        At most one advance runs at a time; a call made while another is in
        flight is ignored.
        """
        if self._loading or not self.has_more:
            return False
        self._loading = True
        try:
            if not self.filters.active and self.visible_count >= len(self._filtered):
                if not await self._fetch_next_page():
                    return False
            before = self.visible_count
            self.visible_count = min(self.visible_count + self.page_size, len(self._filtered))
            return self.visible_count > before
        finally:
            self._loading = False

    async def load_remaining(self) -> None:
        """Fetch everything not yet held so filters see the whole catalog."""
        if self._loading:
            return
        self._loading = True
        try:
            while not self.store_exhausted:
                if not await self._fetch_batch(self.prefetch):
                    break
        finally:
            self._loading = False
        self._reset_window()

    # --- Internals ---

    def _reset_window(self) -> None:
        self._filtered = sort_styles(
            filter_styles(self.styles, self.filters.category, self.filters.query),
            self.filters.sort,
        )
        self.visible_count = min(self.page_size, len(self._filtered))

    async def _fetch_next_page(self) -> bool:
        fresh = await self._fetch_batch(self.page_size)
        self._filtered.extend(fresh)
        return bool(fresh)

    async def _fetch_batch(self, limit: int) -> List[Style]:
        """Append the next ``limit`` styles after the cursor; returns the new ones."""
        try:
            page = list(await self.source.fetch_page(limit, self.cursor))
        except Exception as e:
            error_log("Failed to load more styles", exc=e, context={"cursor": self.cursor}, area="catalog")
            self.error = "Failed to load more styles"
            return []

        if len(page) < limit:
            self.store_exhausted = True
        if page:
            self.cursor = str(page[-1].id)
        # Pages arrive newest-first and older than everything held
        known = {s.id for s in self.styles}
        fresh = [s for s in page if s.id not in known]
        self.styles.extend(fresh)
        if page and not fresh:
            self.store_exhausted = True
        return fresh


class DatabaseStyleSource:
    """Newest-first keyset pagination over the ``styles`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def fetch_page(self, limit: int, after: Optional[str] = None) -> List[Style]:
        stmt = (
            select(Style)
            .order_by(Style.created_at.desc(), Style.id.desc())
            .limit(limit)
        )
        if after:
            try:
                anchor = await self.session.get(Style, uuid.UUID(after))
            except ValueError:
                anchor = None
            if anchor is None:
                logger.warning(f"Unknown pagination cursor: {after}")
                return []
            stmt = stmt.where(
                or_(
                    Style.created_at < anchor.created_at,
                    and_(Style.created_at == anchor.created_at, Style.id < anchor.id),
                )
            )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


async def build_listing(
    session: AsyncSession,
    category: Optional[str] = None,
    query: Optional[str] = None,
    sort: Optional[str] = None,
    pages: int = 1,
    page_size: int = 9,
    prefetch: Optional[int] = None,
) -> CatalogListing:
    """Replay a listing to ``pages`` pages for a server-rendered request."""
    listing = CatalogListing(DatabaseStyleSource(session), page_size=page_size, prefetch=prefetch)
    await listing.load_initial()
    listing.apply_filters(category=category, query=query or "", sort=parse_sort(sort))
    if listing.filters.active:
        await listing.load_remaining()
    for _ in range(max(pages, 1) - 1):
        if not await listing.load_more():
            break
    return listing
