from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable

from ..shared.time import fmt_date, fmt_dt

CSV_HEADERS = [
    "S.No.",
    "Registration Date",
    "Relation Prefix",
    "Full Name",
    "Email",
    "Mobile",
    "Address",
    "Blood Group",
    "Last Donation Date",
]

FIRST_TIME = "First Time"


def build_registrations_csv(registrants: Iterable, tz: str | None = None) -> str:
    """One row per registrant; text columns quoted, the serial number bare."""
    output = io.StringIO()
    csv.writer(output, lineterminator="\n").writerow(CSV_HEADERS)
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for index, r in enumerate(registrants, start=1):
        writer.writerow(
            [
                index,
                fmt_dt(r.created_at, tz),
                r.relation_prefix or "",
                r.full_name or "",
                r.email or "",
                r.mobile or "",
                r.address or "",
                r.blood_group or "",
                fmt_date(r.last_donation_date, empty=FIRST_TIME),
            ]
        )
    return output.getvalue()


def export_filename(today: date) -> str:
    return f"blood-donation-{today.strftime('%d-%m-%Y')}.csv"
