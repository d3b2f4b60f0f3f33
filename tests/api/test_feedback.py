import pytest


@pytest.mark.asyncio
async def test_feedback_requires_sign_in(client):
    resp = await client.post("/api/feedback", json={"comment": "Lovely work, thank you!", "rating": 5})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_feedback_validation(client, sign_up):
    await sign_up()

    short = await client.post("/api/feedback", json={"comment": "   too short   ", "rating": 4})
    assert short.status_code == 400

    too_long = await client.post("/api/feedback", json={"comment": "x" * 501, "rating": 4})
    assert too_long.status_code == 400

    padded = await client.post("/api/feedback", json={"comment": "  " + "y" * 500 + "\n", "rating": 4})
    assert padded.status_code == 201, padded.text
    assert padded.json()["record"]["comment"] == "y" * 500

    bad_rating = await client.post("/api/feedback", json={"comment": "Great fitting dress!", "rating": 6})
    assert bad_rating.status_code == 400


@pytest.mark.asyncio
async def test_customer_feedback_waits_for_approval(client, sign_up, sign_in_admin):
    await sign_up(name="Chioma Buyer")
    resp = await client.post(
        "/api/feedback",
        json={"comment": "  The fitting was perfect!  ", "rating": 5},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Thank you for your feedback! It will be visible after approval."
    record = body["record"]
    assert record["approved"] is False
    assert record["comment"] == "The fitting was perfect!"
    assert record["user_name"] == "Chioma Buyer"

    public = await client.get("/api/feedback")
    assert record["id"] not in {f["id"] for f in public.json()}

    await sign_in_admin()
    approved = await client.patch(f"/api/admin/feedback/{record['id']}/approval")
    assert approved.status_code == 200
    assert approved.json()["record"]["approved"] is True

    public = await client.get("/api/feedback")
    assert record["id"] in {f["id"] for f in public.json()}

    hidden = await client.patch(f"/api/admin/feedback/{record['id']}/approval")
    assert hidden.json()["record"]["approved"] is False
    public = await client.get("/api/feedback")
    assert record["id"] not in {f["id"] for f in public.json()}


@pytest.mark.asyncio
async def test_admin_feedback_is_published_immediately(client, sign_in_admin):
    await sign_in_admin()
    resp = await client.post("/api/feedback", json={"comment": "Posted by the shop owner", "rating": 4})
    body = resp.json()
    assert body["message"] == "Feedback submitted!"
    assert body["record"]["approved"] is True

    public = await client.get("/api/feedback")
    assert public.json()[0]["id"] == body["record"]["id"]


@pytest.mark.asyncio
async def test_public_feed_is_limited(client, sign_in_admin):
    await sign_in_admin()
    for i in range(7):
        await client.post("/api/feedback", json={"comment": f"Review number {i} here", "rating": 5})

    public = await client.get("/api/feedback")
    assert len(public.json()) == 6
    assert public.json()[0]["comment"] == "Review number 6 here"
