"""Home and contact pages."""

from typing import List, Optional

from litestar import Request, get
from litestar.response import Template
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app import config
from app.api.feedback import approved_feedback
from app.catalog.detail import StyleView
from app.catalog.shuffle import shuffled
from app.feedback.carousel import ROTATE_SECONDS, Carousel
from app.models import Feedback, Style, User
from app.utils import get_base_path
from app.utils.logging import error_log

STYLES_PER_VIEW = 3
REVIEWS_PER_VIEW = 1

FAQ = [
    (
        "How long does it take to make an outfit?",
        "Most outfits are ready in 7-14 days. Complex designs or busy seasons may take longer; "
        "we confirm the delivery time when you order.",
    ),
    (
        "Can I bring my own fabric?",
        "Yes. Every style lists a tailoring-only price for when you bring your fabric, "
        "and a price with fabric included.",
    ),
    (
        "How do I place an order?",
        "Open a style and tap \"Order on WhatsApp\". The message is prefilled with the style "
        "details so we can reply with measurements and payment information.",
    ),
    (
        "Do you make custom designs?",
        "Yes. Send us a picture or a description of what you have in mind and we will quote it.",
    ),
]


@get("/")
async def home(
    request: Request,
    session: AsyncSession,
    current_user: Optional[User],
) -> Template:
    """Landing page: latest styles carousel and approved reviews.

    A failed read empties only its own section and shows an inline message.
    """
    viewer_id = current_user.id if current_user else None
    styles: List[StyleView] = []
    styles_error = None
    try:
        result = await session.execute(select(Style).order_by(Style.created_at.desc()))
        styles = [StyleView.from_style(s, viewer_id) for s in shuffled(result.scalars().all())]
    except SQLAlchemyError as e:
        error_log("Failed to load styles for the home page", exc=e, area="home")
        await session.rollback()
        styles_error = "Styles could not be loaded right now."

    reviews: List[Feedback] = []
    reviews_error = None
    try:
        reviews = await approved_feedback(session)
    except SQLAlchemyError as e:
        error_log("Failed to load reviews for the home page", exc=e, area="home")
        await session.rollback()
        reviews_error = "Reviews could not be loaded right now."

    return Template(
        template_name="home/index.html",
        context={
            "base_path": get_base_path(request),
            "current_user": current_user,
            "styles": Carousel(styles, per_view=STYLES_PER_VIEW),
            "styles_error": styles_error,
            "reviews": Carousel(reviews, per_view=REVIEWS_PER_VIEW),
            "reviews_error": reviews_error,
            "rotate_seconds": ROTATE_SECONDS,
        },
    )


@get("/contact")
async def contact(request: Request, current_user: Optional[User]) -> Template:
    """Contact details, FAQ and enquiry link."""
    return Template(
        template_name="home/contact.html",
        context={
            "base_path": get_base_path(request),
            "current_user": current_user,
            "faq": FAQ,
            "whatsapp_number": config.WHATSAPP_NUMBER,
        },
    )


routes = [home, contact]
