from __future__ import annotations

from io import BytesIO

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    send_file,
    session as flask_session,
    url_for,
)

from ..app import db
from ..constants import (
    BLOOD_GROUPS,
    CAMP_TITLE,
    CAMP_TITLE_HI,
    ORGANIZATION_NAME,
    ORGANIZATION_NAME_HI,
    RELATION_PREFIXES,
    bilingual,
)
from ..forms.registration_forms import validate_registration_form
from ..models import Registrant
from ..services.certificate_email import (
    CertificateEmailError,
    CertificateEmailRequest,
    send_certificate_email,
)
from ..services.certificates import prepare_certificate
from ..services.registrations import RegistrationError, create_registration
from ..shared.certificate_export import (
    CertificateExportError,
    encode_canvas,
    export_certificate,
)
from ..shared.certificate_layout import FORMAT_PNG
from ..shared.time import today_in

bp = Blueprint("registration", __name__)

REGISTRATION_KEY = "registration_id"


def _page_context(**extra) -> dict:
    return dict(
        relation_prefixes=RELATION_PREFIXES,
        blood_groups=BLOOD_GROUPS,
        camp_title=CAMP_TITLE,
        camp_title_hi=CAMP_TITLE_HI,
        organization=ORGANIZATION_NAME,
        organization_hi=ORGANIZATION_NAME_HI,
        **extra,
    )


def _current_registrant() -> Registrant | None:
    registration_id = flask_session.get(REGISTRATION_KEY)
    if not registration_id:
        return None
    registrant = db.session.get(Registrant, registration_id)
    if registrant is None:
        flask_session.pop(REGISTRATION_KEY, None)
    return registrant


@bp.get("/")
def index():
    registrant = _current_registrant()
    if registrant is None:
        return render_template("register.html", **_page_context(form={}))
    state = prepare_certificate(registrant.display_name)
    return render_template(
        "thank_you.html",
        **_page_context(
            registrant=registrant,
            image_ready=state.render_complete,
            formats=state.layout.formats,
        ),
    )


@bp.post("/register")
def register():
    today = today_in(current_app.config.get("CAMP_TIMEZONE"))
    errors, cleaned = validate_registration_form(request.form, today)
    if errors:
        flash(errors[0], "error")
        return render_template("register.html", **_page_context(form=cleaned)), 400

    try:
        registrant = create_registration(cleaned)
    except RegistrationError as exc:
        flash(f"{bilingual('registration_failed')}: {exc}", "error")
        return render_template("register.html", **_page_context(form=cleaned)), 500

    try:
        send_certificate_email(CertificateEmailRequest.for_registrant(registrant))
    except CertificateEmailError:
        current_app.logger.warning(
            f"[REG-MAIL-SKIPPED] registration={registrant.id} saved; email not sent"
        )
        flash(bilingual("email_failed"), "warning")

    flask_session[REGISTRATION_KEY] = registrant.id
    flash(bilingual("registration_ok"), "success")
    return redirect(url_for("registration.index"))


@bp.post("/reset")
def reset():
    flask_session.pop(REGISTRATION_KEY, None)
    return redirect(url_for("registration.index"))


@bp.get("/certificate/preview.png")
def certificate_preview():
    registrant = _current_registrant()
    if registrant is None:
        abort(404)
    state = prepare_certificate(registrant.display_name)
    if not state.render_complete:
        abort(404)
    data = encode_canvas(state.canvas, FORMAT_PNG)
    return send_file(BytesIO(data), mimetype="image/png", max_age=0)


@bp.get("/certificate/download/<fmt>")
def certificate_download(fmt: str):
    registrant = _current_registrant()
    if registrant is None:
        abort(404)
    state = prepare_certificate(registrant.display_name)
    try:
        result = export_certificate(state, fmt)
    except CertificateExportError:
        abort(404)
    if result is None:
        abort(404)
    current_app.logger.info(
        f"[CERT-DOWNLOAD] registration={registrant.id} format={fmt}"
    )
    return send_file(
        BytesIO(result.data),
        mimetype=result.mimetype,
        as_attachment=True,
        download_name=result.filename,
    )
