from functools import wraps

from flask import flash, g, redirect, session, url_for

from ..constants import bilingual
from .admin_session import is_session_expired, save_session
from .time import now_utc


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        admin = g.get("admin_session")
        if admin is None:
            return redirect(url_for("auth.login"))
        if is_session_expired(admin, now_utc()):
            save_session(session, None)
            g.admin_session = None
            flash(bilingual("session_expired"), "error")
            return redirect(url_for("auth.login"))
        return fn(*args, **kwargs, current_admin=admin)

    return wrapper
