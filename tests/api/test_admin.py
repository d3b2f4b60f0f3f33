from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import PNG_BYTES, unique_email


@pytest.mark.asyncio
async def test_admin_api_requires_admin(client, sign_up):
    anonymous = await client.get("/api/admin/dashboard")
    assert anonymous.status_code == 401

    await sign_up()
    customer = await client.get("/api/admin/dashboard")
    assert customer.status_code == 403


@pytest.mark.asyncio
async def test_dashboard_shape(client, create_style, sign_in_admin):
    await create_style()
    await sign_in_admin()

    resp = await client.get("/api/admin/dashboard")
    assert resp.status_code == 200
    body = resp.json()
    analytics = body["analytics"]
    assert analytics["total_users"] == len(body["users"])
    assert analytics["total_styles"] == len(body["styles"])
    assert analytics["total_feedback"] == len(body["feedbacks"])
    assert analytics["total_likes"] == sum(s["like_count"] for s in body["styles"])
    assert len(analytics["recent_signups"]) <= 5
    assert len(analytics["popular_styles"]) <= 5


@pytest.mark.asyncio
async def test_upload_without_image_host_uses_placeholder(client, create_style):
    style = await create_style(title="Placeholder Kaftan", category="casual")
    assert style["image_url"].startswith("https://via.placeholder.com/")
    assert style["source"] == "upload"
    assert style["likes"] == []


@pytest.mark.asyncio
async def test_upload_rejects_invalid_fields(client, sign_in_admin):
    await sign_in_admin()
    resp = await client.post(
        "/api/admin/styles",
        data={"title": "ab", "description": "short", "category": "pyjamas"},
        files={"image": ("style.png", PNG_BYTES, "image/png")},
    )
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.json()["extra"]}
    assert {"title", "description", "category"} <= fields


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client, sign_in_admin):
    await sign_in_admin()
    resp = await client.post(
        "/api/admin/styles",
        data={"title": "Text File", "description": "Definitely not an image", "category": "casual"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_upload_failure_creates_nothing(client, sign_in_admin):
    from app.services.images import ImageUploadError

    await sign_in_admin()
    before = (await client.get("/api/admin/dashboard")).json()["analytics"]["total_styles"]

    with patch("app.api.admin.upload_image", new=AsyncMock(side_effect=ImageUploadError("Failed to upload image: boom"))):
        resp = await client.post(
            "/api/admin/styles",
            data={"title": "Doomed Upload", "description": "This upload never lands", "category": "party"},
            files={"image": ("style.png", PNG_BYTES, "image/png")},
        )
    assert resp.status_code == 201
    assert resp.json() == {"success": False, "message": "Failed to upload image: boom", "record": None}

    after = (await client.get("/api/admin/dashboard")).json()["analytics"]["total_styles"]
    assert after == before


@pytest.mark.asyncio
async def test_edit_style_fields(client, create_style):
    style = await create_style()
    resp = await client.patch(
        f"/api/admin/styles/{style['id']}",
        json={"title": "Renamed Gown", "price_with_fabrics": 42000},
    )
    assert resp.status_code == 200
    record = resp.json()["record"]
    assert record["title"] == "Renamed Gown"
    assert record["price_with_fabrics"] == 42000
    assert record["description"] == style["description"]


@pytest.mark.asyncio
async def test_deletes_require_confirmation(client, create_style):
    style = await create_style()

    unconfirmed = await client.delete(f"/api/admin/styles/{style['id']}")
    assert unconfirmed.status_code == 400
    assert (await client.get(f"/api/styles/{style['id']}")).status_code == 200

    confirmed = await client.delete(f"/api/admin/styles/{style['id']}", params={"confirm": "true"})
    assert confirmed.status_code == 200
    assert confirmed.json()["success"] is True
    assert (await client.get(f"/api/styles/{style['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_liked_style(client, create_style, sign_up, sign_in_admin):
    style = await create_style()
    await sign_up()
    await client.post(f"/api/styles/{style['id']}/like")

    await sign_in_admin()
    resp = await client.delete(f"/api/admin/styles/{style['id']}", params={"confirm": "true"})
    assert resp.json()["success"] is True


@pytest.mark.asyncio
async def test_role_change_and_user_delete(client, create_style, sign_up, sign_in_admin):
    style = await create_style()
    user = await sign_up(unique_email("promote"))
    await client.post(f"/api/styles/{style['id']}/like")

    await sign_in_admin()
    promoted = await client.patch(f"/api/admin/users/{user['id']}/role", json={"role": "admin"})
    assert promoted.status_code == 200
    assert promoted.json()["record"]["role"] == "admin"

    unconfirmed = await client.delete(f"/api/admin/users/{user['id']}")
    assert unconfirmed.status_code == 400

    deleted = await client.delete(f"/api/admin/users/{user['id']}", params={"confirm": "true"})
    assert deleted.json()["success"] is True

    # The deleted user's like is gone too
    detail = await client.get(f"/api/styles/{style['id']}")
    assert user["id"] not in detail.json()["style"]["likes"]

    missing = await client.patch(f"/api/admin/users/{user['id']}/role", json={"role": "user"})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_deleted_user_session_is_dropped(client, sign_up, sign_in_admin):
    user = await sign_up()
    cookie = client.cookies.get("session_id")

    await sign_in_admin()
    await client.delete(f"/api/admin/users/{user['id']}", params={"confirm": "true"})

    client.cookies.clear()
    client.cookies.set("session_id", cookie)
    me = await client.get("/api/auth/me")
    assert me.json()["user"] is None


@pytest.mark.asyncio
async def test_feedback_delete(client, sign_in_admin):
    await sign_in_admin()
    created = await client.post("/api/feedback", json={"comment": "Delete me later please", "rating": 3})
    feedback_id = created.json()["record"]["id"]

    resp = await client.delete(f"/api/admin/feedback/{feedback_id}", params={"confirm": "true"})
    assert resp.json()["success"] is True
    public = await client.get("/api/feedback")
    assert feedback_id not in {f["id"] for f in public.json()}


def failing_commit():
    return patch(
        "sqlalchemy.ext.asyncio.AsyncSession.commit",
        new=AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("database is locked"))),
    )


@pytest.mark.asyncio
async def test_failed_style_edit_returns_stored_record(client, create_style):
    style = await create_style(title="Unchanged Iro and Buba")

    with failing_commit():
        resp = await client.patch(f"/api/admin/styles/{style['id']}", json={"title": "Never Saved"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Failed to update style"
    assert body["record"]["title"] == "Unchanged Iro and Buba"

    stored = await client.get(f"/api/styles/{style['id']}")
    assert stored.json()["style"]["title"] == "Unchanged Iro and Buba"


@pytest.mark.asyncio
async def test_failed_role_change_returns_stored_role(client, sign_up, sign_in_admin):
    user = await sign_up()
    await sign_in_admin()

    with failing_commit():
        resp = await client.patch(f"/api/admin/users/{user['id']}/role", json={"role": "admin"})
    body = resp.json()
    assert body["success"] is False
    assert body["record"]["id"] == user["id"]
    assert body["record"]["role"] == "user"
