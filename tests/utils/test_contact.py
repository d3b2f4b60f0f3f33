from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

from app.utils.contact import (
    PriceMode,
    custom_design_link,
    enquiry_link,
    format_naira,
    style_order_link,
    style_order_message,
    whatsapp_link,
)


def make_style(**overrides):
    fields = dict(
        title="Ankara Flare Gown",
        description="Flared ankara gown",
        price_without_fabrics=15000,
        price_with_fabrics=30000,
        delivery_time=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def message_of(link: str) -> str:
    return parse_qs(urlparse(link).query)["text"][0]


def test_format_naira():
    assert format_naira(30000) == "₦30,000"
    assert format_naira(0) == "₦0"
    assert format_naira(None) == "TBD"


def test_whatsapp_link_encodes_message():
    link = whatsapp_link("Hi & welcome?", number="2340000000000")
    assert link == "https://wa.me/2340000000000?text=Hi%20%26%20welcome%3F"


def test_order_message_uses_selected_price():
    style = make_style()
    fabric = style_order_message(style, PriceMode.FABRIC)
    assert "Price (fabric included): ₦30,000" in fabric
    assert "Delivery: 7-14 days" in fabric

    tailoring = style_order_message(style, PriceMode.TAILORING, page_url="https://shop.example.com/styles/1")
    assert "Price (tailoring only): ₦15,000" in tailoring
    assert "View Style: https://shop.example.com/styles/1" in tailoring


def test_order_link_with_missing_price():
    link = style_order_link(make_style(price_with_fabrics=None), PriceMode.FABRIC)
    assert link.startswith("https://wa.me/2348032205341?text=")
    assert "TBD" in message_of(link)


def test_enquiry_and_custom_design_links():
    assert "inquiry about your tailoring services" in message_of(enquiry_link())
    assert "custom design" in message_of(custom_design_link())
