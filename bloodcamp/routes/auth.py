from __future__ import annotations

import hmac
import math
from datetime import timedelta

from flask import (
    Blueprint,
    current_app,
    flash,
    g,
    redirect,
    render_template,
    request,
    session as flask_session,
    url_for,
)

from ..constants import bilingual
from ..shared.admin_session import (
    AdminSession,
    is_locked,
    is_session_expired,
    load_admin_state,
    lockout_remaining,
    register_failure,
    register_success,
    save_lockout,
    save_session,
)
from ..shared.passwords import verify_password
from ..shared.time import now_utc

bp = Blueprint("auth", __name__, url_prefix="/admin")


@bp.before_app_request
def load_admin_context() -> None:
    admin, lockout = load_admin_state(flask_session)
    g.admin_session = admin
    g.admin_lockout = lockout


def _credentials_match(username: str, password: str) -> bool:
    expected_user = current_app.config.get("ADMIN_USERNAME") or ""
    password_hash = current_app.config.get("ADMIN_PASSWORD_HASH")
    if not password_hash:
        return False
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    password_ok = verify_password(password, password_hash)
    return user_ok and password_ok


@bp.route("/login", methods=["GET", "POST"])
def login():
    now = now_utc()
    if not is_session_expired(g.admin_session, now):
        return redirect(url_for("admin.dashboard"))
    if request.method == "GET":
        return render_template("admin_login.html")

    lockout = g.admin_lockout
    if is_locked(lockout, now):
        minutes = math.ceil(lockout_remaining(lockout, now).total_seconds() / 60)
        current_app.logger.info(f"[AUTH-LOCKOUT] rejected remaining_min={minutes}")
        flash(bilingual("login_locked", minutes=minutes), "error")
        return render_template("admin_login.html"), 429

    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""
    if not _credentials_match(username, password):
        lockout = register_failure(
            lockout,
            now,
            current_app.config["ADMIN_MAX_ATTEMPTS"],
            timedelta(minutes=current_app.config["ADMIN_LOCKOUT_MINUTES"]),
        )
        save_lockout(flask_session, lockout)
        current_app.logger.info(
            f"[AUTH-FAIL] admin username={username!r} attempts={lockout.failed_attempts}"
        )
        if is_locked(lockout, now):
            minutes = current_app.config["ADMIN_LOCKOUT_MINUTES"]
            flash(bilingual("login_locked", minutes=minutes), "error")
            return render_template("admin_login.html"), 429
        flash(bilingual("login_failed"), "error")
        return render_template("admin_login.html"), 401

    admin = AdminSession.start(
        username, now, timedelta(hours=current_app.config["ADMIN_SESSION_HOURS"])
    )
    save_session(flask_session, admin)
    save_lockout(flask_session, register_success())
    current_app.logger.info(f"[AUTH] admin granted username={username!r}")
    flash(bilingual("login_ok"), "success")
    return redirect(url_for("admin.dashboard"))


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    save_session(flask_session, None)
    flash(bilingual("logged_out"), "success")
    return redirect(url_for("auth.login"))
