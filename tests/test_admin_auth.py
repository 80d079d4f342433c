from datetime import datetime, timedelta, timezone

import pytest

from bloodcamp.constants import bilingual
from bloodcamp.shared.admin_session import (
    LOCKOUT_KEY,
    SESSION_KEY,
    AdminSession,
    LoginLockout,
    is_locked,
    is_session_expired,
    lockout_remaining,
    register_failure,
    register_success,
)

from helpers import ADMIN_PASSWORD, ADMIN_USERNAME, CSRF_TOKEN

NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
COOLDOWN = timedelta(minutes=15)


def _login(client, password=ADMIN_PASSWORD, username=ADMIN_USERNAME, **kwargs):
    return client.post(
        "/admin/login",
        data={"username": username, "password": password, "csrf_token": CSRF_TOKEN},
        **kwargs,
    )


@pytest.mark.smoke
def test_login_page_renders(client):
    resp = client.get("/admin/login")
    assert resp.status_code == 200
    assert 'name="password"' in resp.get_data(as_text=True)


def test_login_success_opens_dashboard(client):
    resp = _login(client, follow_redirects=True)
    assert resp.request.path == "/admin"
    assert "Welcome to Admin Dashboard" in resp.get_data(as_text=True)
    with client.session_transaction() as sess:
        assert sess[SESSION_KEY]["username"] == ADMIN_USERNAME
        assert LOCKOUT_KEY not in sess


def test_wrong_password(client):
    resp = _login(client, password="nope")
    assert resp.status_code == 401
    assert bilingual("login_failed") in resp.get_data(as_text=True)
    with client.session_transaction() as sess:
        assert sess[LOCKOUT_KEY]["failed_attempts"] == 1


def test_wrong_username(client):
    assert _login(client, username="root").status_code == 401


def test_lockout_blocks_even_correct_credentials(client, monkeypatch):
    assert _login(client, password="x1").status_code == 401
    assert _login(client, password="x2").status_code == 401
    third = _login(client, password="x3")
    assert third.status_code == 429
    assert "15 minute(s)" in third.get_data(as_text=True)

    calls = []
    monkeypatch.setattr(
        "bloodcamp.routes.auth.verify_password",
        lambda *args: calls.append(args) or True,
    )
    fourth = _login(client)

    assert fourth.status_code == 429
    assert "Too many failed attempts" in fourth.get_data(as_text=True)
    assert calls == []
    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess


def test_login_allowed_after_cooldown(client):
    for attempt in range(3):
        _login(client, password=f"bad-{attempt}")
    with client.session_transaction() as sess:
        expired = datetime.now(timezone.utc) - timedelta(seconds=1)
        sess[LOCKOUT_KEY] = {"failed_attempts": 3, "locked_until": expired.isoformat()}

    resp = _login(client)

    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert LOCKOUT_KEY not in sess


def test_success_resets_failure_count(client):
    _login(client, password="bad")
    _login(client)
    client.get("/admin/logout")
    with client.session_transaction() as sess:
        assert LOCKOUT_KEY not in sess


def test_logout_ends_session(admin_client):
    resp = admin_client.get("/admin/logout", follow_redirects=True)
    assert resp.request.path == "/admin/login"
    assert admin_client.get("/admin").status_code == 302


def test_expired_session_redirects_to_login(admin_client):
    with admin_client.session_transaction() as sess:
        stale = datetime.now(timezone.utc) - timedelta(minutes=1)
        sess[SESSION_KEY] = AdminSession(
            username=ADMIN_USERNAME,
            login_at=stale - timedelta(hours=8),
            expires_at=stale,
        ).to_dict()

    resp = admin_client.get("/admin", follow_redirects=True)

    assert resp.request.path == "/admin/login"
    assert bilingual("session_expired") in resp.get_data(as_text=True)
    with admin_client.session_transaction() as sess:
        assert SESSION_KEY not in sess


def test_logged_in_admin_skips_login_page(admin_client):
    resp = admin_client.get("/admin/login")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin")


def test_login_disabled_without_password(app, client):
    app.config["ADMIN_PASSWORD_HASH"] = None
    assert _login(client).status_code == 401


def test_third_failure_locks():
    lockout = LoginLockout()
    for _ in range(2):
        lockout = register_failure(lockout, NOW, 3, COOLDOWN)
        assert not is_locked(lockout, NOW)
    lockout = register_failure(lockout, NOW, 3, COOLDOWN)

    assert lockout.failed_attempts == 3
    assert is_locked(lockout, NOW)
    assert lockout_remaining(lockout, NOW + timedelta(minutes=5)) == timedelta(minutes=10)
    assert not is_locked(lockout, NOW + COOLDOWN)
    assert lockout_remaining(lockout, NOW + COOLDOWN) == timedelta(0)


def test_failure_after_cooldown_starts_fresh_count():
    locked = LoginLockout(failed_attempts=3, locked_until=NOW)

    lockout = register_failure(locked, NOW + timedelta(seconds=1), 3, COOLDOWN)

    assert lockout.failed_attempts == 1
    assert lockout.locked_until is None


def test_register_success_clears_counter():
    assert register_success() == LoginLockout()


def test_session_expiry_boundary():
    admin = AdminSession.start("admin", NOW, timedelta(hours=8))

    assert not is_session_expired(admin, NOW + timedelta(hours=7, minutes=59))
    assert is_session_expired(admin, NOW + timedelta(hours=8))
    assert is_session_expired(None, NOW)


def test_session_round_trips_through_cookie_dict():
    admin = AdminSession.start("admin", NOW, timedelta(hours=8))

    assert AdminSession.from_dict(admin.to_dict()) == admin
    assert AdminSession.from_dict({"username": "admin"}) is None
    assert LoginLockout.from_dict("garbage") == LoginLockout()


def test_login_without_csrf_token_is_rejected(client):
    resp = client.post(
        "/admin/login", data={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )

    assert resp.status_code == 400
    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess
        assert LOCKOUT_KEY not in sess
