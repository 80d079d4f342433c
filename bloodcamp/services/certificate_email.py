from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import render_template

from .. import emailer
from ..constants import CAMP_TITLE, CAMP_TITLE_HI, ORGANIZATION_NAME, ORGANIZATION_NAME_HI
from ..shared.mail_utils import mask_address

logger = logging.getLogger("bloodcamp.mailer")

SUBJECT = "Blood Donation Certificate - रक्तदान प्रमाणपत्र"
REQUIRED_FIELDS = ("email", "fullName", "relationPrefix", "bloodGroup", "registrationId")


class CertificateEmailError(RuntimeError):
    pass


@dataclass(frozen=True)
class CertificateEmailRequest:
    email: str
    full_name: str
    relation_prefix: str
    blood_group: str
    registration_id: str

    @classmethod
    def from_payload(cls, payload: dict | None) -> "CertificateEmailRequest":
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object")
        missing = [key for key in REQUIRED_FIELDS if not str(payload.get(key) or "").strip()]
        if missing:
            raise ValueError(f"Missing fields: {', '.join(missing)}")
        return cls(
            email=str(payload["email"]).strip(),
            full_name=str(payload["fullName"]).strip(),
            relation_prefix=str(payload["relationPrefix"]).strip(),
            blood_group=str(payload["bloodGroup"]).strip(),
            registration_id=str(payload["registrationId"]).strip(),
        )

    @classmethod
    def for_registrant(cls, registrant) -> "CertificateEmailRequest":
        return cls(
            email=registrant.email,
            full_name=registrant.full_name,
            relation_prefix=registrant.relation_prefix,
            blood_group=registrant.blood_group,
            registration_id=registrant.id,
        )

    def to_payload(self) -> dict:
        return {
            "email": self.email,
            "fullName": self.full_name,
            "relationPrefix": self.relation_prefix,
            "bloodGroup": self.blood_group,
            "registrationId": self.registration_id,
        }


def render_certificate_email(request: CertificateEmailRequest) -> tuple[str, str]:
    context = dict(
        req=request,
        camp_title=CAMP_TITLE,
        camp_title_hi=CAMP_TITLE_HI,
        organization=ORGANIZATION_NAME,
        organization_hi=ORGANIZATION_NAME_HI,
    )
    text = render_template("email/certificate.txt", **context)
    html = render_template("email/certificate.html", **context)
    return text, html


def send_certificate_email(request: CertificateEmailRequest) -> dict:
    """Build the certificate email and hand it to the mailer.

    Without SMTP configuration the mailer only logs the message; the
    certificate still counts as prepared.
    """
    text, html = render_certificate_email(request)
    result = emailer.send(request.email, SUBJECT, text, html=html)
    if not result["ok"] and result.get("mode") != "stub":
        logger.error(
            "[CERT-MAIL-FAIL] registration=%s to=%s detail=%s",
            request.registration_id,
            mask_address(request.email),
            result["detail"],
        )
        raise CertificateEmailError(result["detail"])
    logger.info(
        "[CERT-MAIL] registration=%s to=%s mode=%s",
        request.registration_id,
        mask_address(request.email),
        result.get("mode"),
    )
    return {
        "success": True,
        "message": "Certificate prepared successfully",
        "registrationId": request.registration_id,
    }
