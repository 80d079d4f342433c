from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..services.certificate_email import (
    CertificateEmailError,
    CertificateEmailRequest,
    send_certificate_email,
)

bp = Blueprint("functions", __name__, url_prefix="/functions")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _with_cors(resp, status: int = 200):
    for key, value in CORS_HEADERS.items():
        resp.headers[key] = value
    return resp, status


@bp.route("/send-certificate", methods=["POST", "OPTIONS"])
def send_certificate():
    if request.method == "OPTIONS":
        return _with_cors(current_app.response_class("ok"))
    try:
        req = CertificateEmailRequest.from_payload(request.get_json(silent=True))
    except ValueError as exc:
        return _with_cors(jsonify({"error": str(exc)}), 400)
    try:
        result = send_certificate_email(req)
    except CertificateEmailError as exc:
        current_app.logger.error(f"[CERT-MAIL-FAIL] endpoint registration={req.registration_id}")
        return _with_cors(jsonify({"error": str(exc)}), 500)
    return _with_cors(jsonify(result))
