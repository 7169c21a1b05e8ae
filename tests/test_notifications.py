from sqlalchemy import select

from conftest import bearer, make_notification
from offmarket.models import Notification
from offmarket.models.notification import NotificationType
from offmarket.services.notifications import create_notification


async def test_requires_bearer_token(client):
    resp = await client.get("/api/notifications")
    assert resp.status_code == 401
    assert resp.json() == {
        "success": False,
        "error": {"code": "UNAUTHORIZED", "message": "Unauthorized"},
    }


async def test_rejects_garbage_token(client):
    resp = await client.get(
        "/api/notifications/unread-count", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401


async def test_list_newest_first_with_counts(client, db, alice, bob):
    oldest = await make_notification(db, alice, minutes=0, is_read=True)
    middle = await make_notification(db, alice, minutes=1)
    newest = await make_notification(db, alice, minutes=2)
    await make_notification(db, bob, minutes=3)

    resp = await client.get("/api/notifications", headers=bearer(alice))
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert "error" not in body

    data = body["data"]
    assert [n["id"] for n in data["notifications"]] == [newest.id, middle.id, oldest.id]
    assert data["total"] == 3
    assert data["unreadCount"] == 2

    first = data["notifications"][0]
    assert first["userId"] == alice.id
    assert first["isRead"] is False
    assert first["type"] == "NEW_MATCH"
    assert first["data"] == {"matchScore": 80}
    assert "createdAt" in first


async def test_pagination_returns_second_item(client, db, alice):
    await make_notification(db, alice, minutes=0)
    second = await make_notification(db, alice, minutes=1)
    await make_notification(db, alice, minutes=2)

    resp = await client.get(
        "/api/notifications", params={"limit": 1, "offset": 1}, headers=bearer(alice)
    )
    data = resp.json()["data"]
    assert [n["id"] for n in data["notifications"]] == [second.id]
    assert data["total"] == 3


async def test_unread_only_is_subset_of_full_listing(client, db, alice):
    await make_notification(db, alice, minutes=0, is_read=True)
    await make_notification(db, alice, minutes=1)
    await make_notification(db, alice, minutes=2)

    everything = (await client.get("/api/notifications", headers=bearer(alice))).json()["data"]
    unread = (
        await client.get("/api/notifications", params={"unreadOnly": "true"}, headers=bearer(alice))
    ).json()["data"]

    all_ids = {n["id"] for n in everything["notifications"]}
    expected = [n["id"] for n in everything["notifications"] if not n["isRead"]]
    assert [n["id"] for n in unread["notifications"]] == expected
    assert {n["id"] for n in unread["notifications"]} <= all_ids
    assert unread["total"] == 2
    assert unread["unreadCount"] == everything["unreadCount"] == 2


async def test_negative_limit_is_a_validation_error(client, alice):
    resp = await client.get("/api/notifications", params={"limit": -1}, headers=bearer(alice))
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


async def test_unread_only_accepts_only_literal_true(client, db, alice):
    await make_notification(db, alice, minutes=0, is_read=True)
    await make_notification(db, alice, minutes=1)

    for value in ("1", "yes", "on", "foo"):
        resp = await client.get(
            "/api/notifications", params={"unreadOnly": value}, headers=bearer(alice)
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["total"] == 2


async def test_non_integer_offset_is_a_validation_error(client, alice):
    resp = await client.get("/api/notifications", params={"offset": "abc"}, headers=bearer(alice))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_listing_unread_count_matches_badge(client, db, alice):
    await make_notification(db, alice, minutes=0)
    await make_notification(db, alice, minutes=1, is_read=True)

    listing = (await client.get("/api/notifications", headers=bearer(alice))).json()["data"]
    badge = (await client.get("/api/notifications/unread-count", headers=bearer(alice))).json()
    assert badge == {"success": True, "data": {"count": 1}}
    assert listing["unreadCount"] == badge["data"]["count"]


async def test_mark_read_returns_updated_notification(client, db, alice):
    notification = await make_notification(db, alice)

    resp = await client.patch(f"/api/notifications/{notification.id}/read", headers=bearer(alice))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == notification.id
    assert data["isRead"] is True


async def test_mark_read_on_someone_elses_notification_is_forbidden(client, db, alice, bob):
    notification = await make_notification(db, alice)

    resp = await client.patch(f"/api/notifications/{notification.id}/read", headers=bearer(bob))
    assert resp.status_code == 403
    assert resp.json()["error"] == {"code": "FORBIDDEN", "message": "Not authorized"}

    row = await db.scalar(
        select(Notification.is_read).where(Notification.id == notification.id)
    )
    assert row is False


async def test_mark_read_unknown_id_is_not_found(client, alice):
    resp = await client.patch("/api/notifications/does-not-exist/read", headers=bearer(alice))
    assert resp.status_code == 404
    assert resp.json()["error"] == {"code": "NOT_FOUND", "message": "Notification not found"}


async def test_delete_someone_elses_notification_is_forbidden(client, db, alice, bob):
    notification = await make_notification(db, alice)

    resp = await client.delete(f"/api/notifications/{notification.id}", headers=bearer(bob))
    assert resp.status_code == 403

    still_there = await db.scalar(select(Notification.id).where(Notification.id == notification.id))
    assert still_there == notification.id


async def test_delete_unknown_id_is_not_found(client, alice):
    resp = await client.delete("/api/notifications/does-not-exist", headers=bearer(alice))
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


async def test_mark_all_read_only_touches_caller(client, db, alice, bob):
    await make_notification(db, alice, minutes=0)
    await make_notification(db, alice, minutes=1)
    await make_notification(db, bob, minutes=2)

    resp = await client.patch("/api/notifications/read-all", headers=bearer(alice))
    assert resp.json() == {"success": True, "data": {"marked": True}}

    listing = (await client.get("/api/notifications", headers=bearer(alice))).json()["data"]
    assert all(n["isRead"] for n in listing["notifications"])
    assert listing["unreadCount"] == 0

    bob_badge = (await client.get("/api/notifications/unread-count", headers=bearer(bob))).json()
    assert bob_badge["data"]["count"] == 1


async def test_mark_all_read_with_nothing_unread_still_reports_marked(client, alice):
    resp = await client.patch("/api/notifications/read-all", headers=bearer(alice))
    assert resp.status_code == 200
    assert resp.json()["data"] == {"marked": True}


async def test_read_and_delete_scenario(client, db, alice):
    read_one = await make_notification(db, alice, minutes=0, is_read=True)
    unread_a = await make_notification(db, alice, minutes=1)
    await make_notification(db, alice, minutes=2)
    headers = bearer(alice)

    listing = (await client.get("/api/notifications", headers=headers)).json()["data"]
    assert (listing["total"], listing["unreadCount"]) == (3, 2)

    await client.patch(f"/api/notifications/{unread_a.id}/read", headers=headers)
    badge = (await client.get("/api/notifications/unread-count", headers=headers)).json()
    assert badge["data"] == {"count": 1}

    await client.patch("/api/notifications/read-all", headers=headers)
    badge = (await client.get("/api/notifications/unread-count", headers=headers)).json()
    assert badge["data"] == {"count": 0}

    resp = await client.delete(f"/api/notifications/{read_one.id}", headers=headers)
    assert resp.json() == {"success": True, "data": {"deleted": True}}

    listing = (await client.get("/api/notifications", headers=headers)).json()["data"]
    assert listing["total"] == 2


async def test_server_error_is_generic(client, alice, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr("offmarket.services.notifications.count_unread", boom)

    resp = await client.get("/api/notifications/unread-count", headers=bearer(alice))
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": {"code": "SERVER_ERROR", "message": "Failed to fetch unread count"},
    }


async def test_create_notification_defaults_to_unread(db, alice):
    notification = await create_notification(
        db, alice.id, NotificationType.SYSTEM, "Welcome", "Your property is registered privately."
    )
    assert notification.is_read is False
    assert notification.data is None
    assert notification.created_at is not None
