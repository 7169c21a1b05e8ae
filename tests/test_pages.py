from conftest import make_notification, sign_in
from offmarket.models import Role
from offmarket.routers.auth import COOKIE_KEY
from offmarket.routers.signin import safe_callback_url
from offmarket.services.auth import decode_access_token


async def test_root_redirects_to_owner_landing(client):
    resp = await client.get("/")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/owner"


async def test_admin_redirects_anonymous_to_signin(client):
    resp = await client.get("/admin")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/auth/signin?callbackUrl=/admin"


async def test_admin_users_keeps_its_own_callback(client):
    resp = await client.get("/admin/users")
    assert resp.headers["location"] == "/auth/signin?callbackUrl=/admin/users"


async def test_admin_redirects_non_admin_home(client, alice):
    sign_in(client, alice)
    resp = await client.get("/admin")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"


async def test_admin_with_stale_cookie_goes_to_signin(client):
    client.cookies.set(COOKIE_KEY, "expired-or-forged")
    resp = await client.get("/admin")
    assert resp.headers["location"].startswith("/auth/signin")


async def test_dashboard_renders_for_admin(client, db, admin, alice):
    await make_notification(db, alice)
    sign_in(client, admin)

    resp = await client.get("/admin")
    assert resp.status_code == 200
    assert "Dashboard" in resp.text
    assert "Total Users" in resp.text
    assert "alice@example.com" in resp.text


async def test_users_page_lists_and_toggles_role(client, db, admin, alice):
    sign_in(client, admin)

    resp = await client.get("/admin/users", params={"search": "alice"})
    assert resp.status_code == 200
    assert "alice@example.com" in resp.text
    assert "admin@example.com" not in resp.text

    resp = await client.post(
        f"/admin/users/{alice.id}/role",
        data={"role": "ADMIN", "return_to": "/admin/users?page=1&search=alice"},
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/users?page=1&search=alice"

    await db.refresh(alice)
    assert alice.role == Role.ADMIN


async def test_role_toggle_with_unknown_role_returns_to_list(client, db, admin, alice):
    sign_in(client, admin)

    resp = await client.post(
        f"/admin/users/{alice.id}/role",
        data={"role": "SUPERUSER", "return_to": "/admin/users?page=2&search="},
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/users?page=2&search="

    await db.refresh(alice)
    assert alice.role == Role.USER


async def test_role_toggle_without_role_returns_to_list(client, admin, alice):
    sign_in(client, admin)

    resp = await client.post(f"/admin/users/{alice.id}/role", data={})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/users"


async def test_role_toggle_requires_admin(client, db, alice, bob):
    sign_in(client, alice)
    resp = await client.post(f"/admin/users/{bob.id}/role", data={"role": "ADMIN"})
    assert resp.headers["location"] == "/"

    await db.refresh(bob)
    assert bob.role == Role.USER


async def test_signin_page_renders(client):
    resp = await client.get("/auth/signin", params={"callbackUrl": "/admin"})
    assert resp.status_code == 200
    assert 'value="/admin"' in resp.text


async def test_email_signin_sets_cookie_and_redirects(client):
    resp = await client.post(
        "/auth/signin", data={"email": "dave@example.com", "callbackUrl": "/admin/users"}
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/users"

    claims = decode_access_token(resp.cookies[COOKIE_KEY])
    assert claims.email == "dave@example.com"


async def test_email_signin_ignores_offsite_callback(client):
    resp = await client.post(
        "/auth/signin", data={"email": "dave@example.com", "callbackUrl": "https://evil.example"}
    )
    assert resp.headers["location"] == "/"


async def test_email_signin_rejects_bad_email(client):
    resp = await client.post("/auth/signin", data={"email": "nope"})
    assert resp.status_code == 400
    assert "valid email" in resp.text


async def test_signout_clears_cookie(client, alice):
    sign_in(client, alice)
    resp = await client.get("/auth/signout")
    assert resp.status_code == 303
    assert COOKIE_KEY in resp.headers["set-cookie"]


def test_safe_callback_url():
    assert safe_callback_url("/admin") == "/admin"
    assert safe_callback_url(None) == "/"
    assert safe_callback_url("//evil.example") == "/"
    assert safe_callback_url("https://evil.example/admin") == "/"
    assert safe_callback_url("/\\evil.example") == "/"


async def test_owner_landing_renders(client):
    resp = await client.get("/owner")
    assert resp.status_code == 200
    assert "Discover Hidden Demand" in resp.text
    assert "Frequently Asked Questions" in resp.text


async def test_owner_widget_requires_address(client):
    resp = await client.get("/owner", params={"address": "", "city": "Auckland"})
    assert "Address is required" in resp.text


async def test_owner_widget_shows_no_demand(client):
    resp = await client.get("/owner", params={"address": "1 Nowhere Road"})
    assert "No current buyers registered for this area" in resp.text
