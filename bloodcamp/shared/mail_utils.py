"""Mail helper utilities."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger("bloodcamp.mailer")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SPLIT_RE = re.compile(r"[;,]")


def is_valid_email(value: str | None) -> bool:
    return bool(value) and EMAIL_RE.match(value) is not None


def normalize_recipients(recipients: Sequence[str] | str | None) -> tuple[list[str], str]:
    """Return (envelope, To header), dropping blanks, duplicates and junk."""

    if recipients is None:
        tokens: list[str] = []
    elif isinstance(recipients, str):
        tokens = _SPLIT_RE.split(recipients)
    else:
        tokens = [str(value) for value in recipients]

    seen: set[str] = set()
    kept: list[str] = []
    for raw in tokens:
        candidate = (raw or "").strip()
        if not candidate:
            continue
        if not is_valid_email(candidate):
            logger.warning("[MAIL-INVALID-RECIPIENT] token=%s", candidate)
            continue
        if candidate.lower() in seen:
            continue
        seen.add(candidate.lower())
        kept.append(candidate)
    return kept, ", ".join(kept)


def mask_address(address: str | None) -> str:
    if not address or "@" not in address:
        return "***"
    local, domain = address.split("@", 1)
    return f"{local[:2]}***@{domain}"
