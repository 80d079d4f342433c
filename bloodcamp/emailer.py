import json
import logging
import os
import smtplib
import sys
from email.message import EmailMessage
from typing import Sequence

from .shared.mail_utils import normalize_recipients

logger = logging.getLogger("bloodcamp.mailer")
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


def smtp_settings() -> dict:
    return {
        "host": os.getenv("SMTP_HOST"),
        "port": os.getenv("SMTP_PORT"),
        "user": os.getenv("SMTP_USER"),
        "password": os.getenv("SMTP_PASS"),
        "from_addr": os.getenv("SMTP_FROM_DEFAULT"),
        "from_name": os.getenv("SMTP_FROM_NAME", ""),
    }


def send(
    recipients: Sequence[str] | str | None,
    subject: str,
    body: str,
    html: str | None = None,
):
    """Send a message, or log it when SMTP is not configured.

    Returns ``{"ok", "mode", "detail"}``; mode is ``stub`` or ``real``.
    """
    settings = smtp_settings()
    host = settings["host"]
    port = settings["port"]
    from_addr = settings["from_addr"]

    envelope, header = normalize_recipients(recipients)
    if not host or not port or not from_addr:
        logger.info(
            "[MAIL-OUT] mode=stub to_header=%s envelope=%s subject=\"%s\" result=stub",
            header,
            json.dumps(envelope),
            subject,
        )
        logger.info("[MAIL-OUT] mode=stub body=%s", html or body)
        return {"ok": False, "mode": "stub", "detail": "stub: missing config"}

    if not envelope:
        logger.warning("[MAIL-NO-RECIPIENTS] subject=\"%s\" host=%s", subject, host)
        return {"ok": False, "mode": "real", "detail": "no valid recipients"}

    try:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["To"] = header
        from_name = settings["from_name"]
        msg["From"] = f"{from_name} <{from_addr}>" if from_name else from_addr
        msg.set_content(body)
        if html:
            msg.add_alternative(html, subtype="html")
        port_int = int(port)
        smtp_cls = smtplib.SMTP_SSL if port_int == 465 else smtplib.SMTP
        with smtp_cls(host, port_int) as server:
            if port_int == 587:
                server.starttls()
            if settings["user"] and settings["password"]:
                server.login(settings["user"], settings["password"])
            server.sendmail(from_addr, envelope, msg.as_string())
    except (OSError, smtplib.SMTPException, ValueError) as e:
        logger.info(
            "[MAIL-OUT] mode=real to_header=%s subject=\"%s\" host=%s result=%s",
            header,
            subject,
            host,
            e,
        )
        return {"ok": False, "mode": "real", "detail": str(e)}
    logger.info(
        "[MAIL-OUT] mode=real to_header=%s envelope=%s subject=\"%s\" host=%s result=sent",
        header,
        json.dumps(envelope),
        subject,
        host,
    )
    return {"ok": True, "mode": "real", "detail": "sent"}
