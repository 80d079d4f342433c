from datetime import datetime, date, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def camp_zone(tz: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(tz or "Asia/Kolkata")
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def fmt_dt(value: datetime | None, tz: str | None = None) -> str:
    """Render as dd/MM/yyyy HH:mm in the camp timezone."""
    if not value:
        return ""
    local = as_utc(value).astimezone(camp_zone(tz))
    return local.strftime("%d/%m/%Y %H:%M")


def fmt_date(value: date | None, empty: str = "") -> str:
    if not value:
        return empty
    return value.strftime("%d/%m/%Y")


def parse_display_date(value: str) -> date | None:
    """Parse DD/MM/YYYY, rejecting impossible calendar dates."""
    try:
        return datetime.strptime(value, "%d/%m/%Y").date()
    except ValueError:
        return None


def today_in(tz: str | None) -> date:
    return now_utc().astimezone(camp_zone(tz)).date()
