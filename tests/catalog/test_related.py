import uuid
from datetime import datetime, timedelta, timezone

from app.catalog.detail import StyleView, parse_price_mode, pick_related
from app.models import Style, StyleCategory, StyleLike
from app.utils.contact import PriceMode


def make_style(category=StyleCategory.NATIVE, likes=0, **fields) -> Style:
    return Style(
        id=uuid.uuid4(),
        title=fields.pop("title", "Native Style"),
        category=category,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=likes),
        likes=[StyleLike(user_id=uuid.uuid4()) for _ in range(likes)],
        **fields,
    )


def test_related_prefers_same_category_ranked_by_likes():
    current = make_style(likes=10)
    natives = [make_style(likes=n) for n in (1, 4, 2, 3)]
    general = [make_style(StyleCategory.PARTY, likes=50)]

    related = pick_related(current.id, [current, *natives], general)

    assert len(related) == 3
    assert all(s.category == StyleCategory.NATIVE for s in related)
    assert current.id not in {s.id for s in related}
    assert [s.like_count for s in related] == [4, 3, 2]


def test_related_backfills_when_category_is_short():
    current = make_style()
    only_native = make_style(likes=1)
    general = [current, only_native, make_style(StyleCategory.CASUAL, likes=7), make_style(StyleCategory.PARTY, likes=2)]

    related = pick_related(current.id, [only_native], general)

    assert [s.like_count for s in related] == [7, 2, 1]
    assert len({s.id for s in related}) == 3


def test_related_with_nothing_else():
    current = make_style()
    assert pick_related(current.id, [], [current]) == []


def test_style_view_fills_defaults():
    style = make_style(title=None)
    viewer = uuid.uuid4()
    style.likes.append(StyleLike(user_id=viewer))

    view = StyleView.from_style(style, viewer)

    assert view.title == "Untitled Style"
    assert view.description == "No description available"
    assert view.image_url.startswith("https://")
    assert view.delivery_time == "7-14 days"
    assert view.liked is True
    assert view.like_count == 1


def test_parse_price_mode_defaults_to_fabric():
    assert parse_price_mode(None) == PriceMode.FABRIC
    assert parse_price_mode("TAILORING") == PriceMode.TAILORING
    assert parse_price_mode("bogus") == PriceMode.FABRIC
