from __future__ import annotations

import re
from datetime import date

from ..constants import BLOOD_GROUPS, RELATION_PREFIX_VALUES, bilingual
from ..shared.mail_utils import is_valid_email
from ..shared.time import parse_display_date

MOBILE_RE = re.compile(r"^[6-9]\d{9}$")
DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")

REQUIRED_FIELDS = (
    "full_name",
    "email",
    "relation_prefix",
    "mobile",
    "address",
    "blood_group",
)


def format_date_input(value: str) -> str:
    """Keep digits and slashes and insert the DD/MM/YYYY separators."""
    clean = re.sub(r"[^\d/]", "", value or "")
    formatted = clean
    if len(clean) >= 2 and "/" not in clean:
        formatted = clean[:2] + "/" + clean[2:]
        if len(clean) > 4:
            formatted = clean[:2] + "/" + clean[2:4] + "/" + clean[4:]
    elif len(clean) >= 5 and len(clean.split("/")) == 2:
        day, rest = clean.split("/")
        formatted = day + "/" + rest[:2] + "/" + rest[2:]
    return formatted[:10]


def validate_last_donation_date(value: str, today: date) -> date | None:
    if not DATE_RE.match(value):
        return None
    parsed = parse_display_date(value)
    if parsed is None or parsed > today:
        return None
    return parsed


def validate_registration_form(data, today: date) -> tuple[list[str], dict]:
    """Validate registration form input.
    Returns (errors, cleaned_data); errors are bilingual, in check order.
    """
    errors: list[str] = []
    cleaned: dict = {
        key: (data.get(key) or "").strip() for key in REQUIRED_FIELDS
    }
    raw_date = format_date_input((data.get("last_donation_date") or "").strip())
    cleaned["last_donation_date_input"] = raw_date
    cleaned["last_donation_date"] = None

    if any(not cleaned[key] for key in REQUIRED_FIELDS):
        errors.append(bilingual("required"))
        return errors, cleaned
    if not is_valid_email(cleaned["email"]):
        errors.append(bilingual("invalid_email"))
    if not MOBILE_RE.match(cleaned["mobile"]):
        errors.append(bilingual("invalid_mobile"))
    if cleaned["relation_prefix"] not in RELATION_PREFIX_VALUES:
        errors.append(bilingual("invalid_prefix"))
    if cleaned["blood_group"] not in BLOOD_GROUPS:
        errors.append(bilingual("invalid_blood_group"))
    if raw_date:
        parsed = validate_last_donation_date(raw_date, today)
        if parsed is None:
            errors.append(bilingual("invalid_date"))
        cleaned["last_donation_date"] = parsed
    return errors, cleaned
