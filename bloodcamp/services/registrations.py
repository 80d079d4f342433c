from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from ..app import db
from ..models import Registrant
from ..shared.mail_utils import mask_address
from ..shared.time import now_utc
from .change_feed import registration_feed

logger = logging.getLogger("bloodcamp.registrations")


class RegistrationError(RuntimeError):
    pass


def create_registration(cleaned: dict) -> Registrant:
    """Insert one registrant and notify dashboard subscribers."""
    registrant = Registrant(
        full_name=cleaned["full_name"],
        email=cleaned["email"],
        relation_prefix=cleaned["relation_prefix"],
        mobile=cleaned["mobile"],
        address=cleaned["address"],
        blood_group=cleaned["blood_group"],
        last_donation_date=cleaned.get("last_donation_date"),
    )
    try:
        db.session.add(registrant)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("[REG-FAIL] email=%s error=%s", mask_address(cleaned.get("email")), exc)
        raise RegistrationError(str(exc.__class__.__name__)) from exc
    logger.info(
        "[REG-SAVED] id=%s email=%s blood_group=%s",
        registrant.id,
        mask_address(registrant.email),
        registrant.blood_group,
    )
    registration_feed.publish_insert(registrant.to_dict())
    return registrant


def list_registrations() -> list[Registrant]:
    return (
        db.session.query(Registrant)
        .order_by(Registrant.created_at.desc(), Registrant.id)
        .all()
    )


def dashboard_stats(registrants: list[Registrant]) -> dict:
    cutoff = now_utc() - timedelta(hours=24)
    recent = 0
    for r in registrants:
        created = r.created_at
        if created is None:
            continue
        if created.tzinfo is None:
            created = created.replace(tzinfo=cutoff.tzinfo)
        if created >= cutoff:
            recent += 1
    return {
        "total": len(registrants),
        "last_24h": recent,
        "blood_groups": len({r.blood_group for r in registrants}),
        "repeat_donors": sum(1 for r in registrants if r.last_donation_date),
    }
