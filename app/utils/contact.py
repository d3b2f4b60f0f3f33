"""WhatsApp link builders for order and enquiry actions.

Nothing is sent to our own backend: these only build the outbound URL that
the browser opens in a new tab.
"""

import enum
from typing import Optional
from urllib.parse import quote

from app import config

BUSINESS_NAME = "OmifemCuts"
DEFAULT_DELIVERY_TIME = "7-14 days"


class PriceMode(str, enum.Enum):
    """Which of a style's two prices the viewer is looking at."""
    TAILORING = "tailoring"  # Sewing only, customer brings fabric
    FABRIC = "fabric"        # Fabric included


def format_naira(amount: Optional[int]) -> str:
    if amount is None:
        return "TBD"
    return f"₦{amount:,}"


def whatsapp_link(message: str, number: Optional[str] = None) -> str:
    return f"https://wa.me/{number or config.WHATSAPP_NUMBER}?text={quote(message, safe='')}"


def displayed_price(style, mode: PriceMode) -> Optional[int]:
    """The price shown for ``mode``."""
    if mode == PriceMode.FABRIC:
        return style.price_with_fabrics
    return style.price_without_fabrics


def style_order_message(style, mode: PriceMode = PriceMode.FABRIC, page_url: str = "") -> str:
    label = "Price (fabric included)" if mode == PriceMode.FABRIC else "Price (tailoring only)"
    lines = [
        f"Hello {BUSINESS_NAME}, I'm interested in this style:",
        "",
        f"✨ *{style.title}* ✨",
        style.description or "",
        "",
        f"💰 {label}: {format_naira(displayed_price(style, mode))}",
        f"⏰ Delivery: {style.delivery_time or DEFAULT_DELIVERY_TIME}",
    ]
    if page_url:
        lines.append(f"🔗 View Style: {page_url}")
    lines += [
        "",
        "How much will it cost to get this outfit and how many days will it take to be delivered?",
    ]
    return "\n".join(lines)


def style_order_link(style, mode: PriceMode = PriceMode.FABRIC, page_url: str = "") -> str:
    return whatsapp_link(style_order_message(style, mode, page_url))


def custom_design_link() -> str:
    return whatsapp_link(f"Hello {BUSINESS_NAME}, I would like to discuss a custom design.")


def enquiry_link() -> str:
    return whatsapp_link(
        f"Hello {BUSINESS_NAME}, I would like to make an inquiry about your tailoring services."
    )
