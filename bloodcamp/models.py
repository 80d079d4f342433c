from __future__ import annotations

import uuid

from sqlalchemy.orm import validates

from .app import db
from .shared.time import as_utc, now_utc


def _new_id() -> str:
    return str(uuid.uuid4())


class Registrant(db.Model):
    __tablename__ = "blood_donations"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    full_name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    relation_prefix = db.Column(db.String(20), nullable=False)
    mobile = db.Column(db.String(10), nullable=False)
    address = db.Column(db.Text, nullable=False)
    blood_group = db.Column(db.String(3), nullable=False)
    last_donation_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=now_utc, onupdate=now_utc
    )
    __table_args__ = (db.Index("ix_blood_donations_created_at", "created_at"),)

    @validates("email")
    def strip_email(self, key, value):
        return value.strip()

    @property
    def display_name(self) -> str:
        return f"{self.relation_prefix} {self.full_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "relation_prefix": self.relation_prefix,
            "mobile": self.mobile,
            "address": self.address,
            "blood_group": self.blood_group,
            "last_donation_date": (
                self.last_donation_date.isoformat() if self.last_donation_date else None
            ),
            "created_at": as_utc(self.created_at).isoformat() if self.created_at else None,
            "updated_at": as_utc(self.updated_at).isoformat() if self.updated_at else None,
        }
