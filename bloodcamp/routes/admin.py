from __future__ import annotations

from flask import (
    Blueprint,
    Response,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    stream_with_context,
    url_for,
)

from ..constants import BLOOD_GROUPS, bilingual
from ..services.change_feed import registration_feed, stream_events
from ..services.csv_export import build_registrations_csv, export_filename
from ..services.registrations import dashboard_stats, list_registrations
from ..shared.rbac import admin_required
from ..shared.time import today_in

bp = Blueprint("admin", __name__, url_prefix="/admin")


@bp.get("")
@admin_required
def dashboard(current_admin):
    registrants = list_registrations()
    return render_template(
        "admin_dashboard.html",
        registrants=registrants,
        stats=dashboard_stats(registrants),
        blood_groups=BLOOD_GROUPS,
        admin=current_admin,
    )


@bp.get("/registrations.json")
@admin_required
def registrations_json(current_admin):
    registrants = list_registrations()
    return jsonify(
        {
            "count": len(registrants),
            "stats": dashboard_stats(registrants),
            "data": [r.to_dict() for r in registrants],
        }
    )


@bp.get("/stream")
@admin_required
def stream(current_admin):
    resp = Response(
        stream_with_context(stream_events(registration_feed)),
        mimetype="text/event-stream",
    )
    resp.headers["Cache-Control"] = "no-cache"
    resp.headers["X-Accel-Buffering"] = "no"
    return resp


@bp.get("/export.csv")
@admin_required
def export_csv(current_admin):
    registrants = list_registrations()
    if not registrants:
        flash(bilingual("export_empty"), "error")
        return redirect(url_for("admin.dashboard"))
    tz = current_app.config.get("CAMP_TIMEZONE")
    body = build_registrations_csv(registrants, tz)
    filename = export_filename(today_in(tz))
    current_app.logger.info(
        f"[EXPORT] registrations rows={len(registrants)} by={current_admin.username}"
    )
    resp = Response(body, mimetype="text/csv; charset=utf-8")
    resp.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return resp
