"""Admin session and login-lockout bookkeeping.

Both are plain value objects kept in the signed Flask session cookie. Every
decision about expiry or lockout is a pure function of the stored timestamps
and ``now``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .time import as_utc

SESSION_KEY = "admin_session"
LOCKOUT_KEY = "admin_lockout"


@dataclass(frozen=True)
class AdminSession:
    username: str
    login_at: datetime
    expires_at: datetime

    @classmethod
    def start(cls, username: str, now: datetime, ttl: timedelta) -> "AdminSession":
        return cls(username=username, login_at=now, expires_at=now + ttl)

    def to_dict(self) -> dict:
        return {
            "username": self.username,
            "login_at": self.login_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw) -> Optional["AdminSession"]:
        if not isinstance(raw, dict):
            return None
        try:
            return cls(
                username=str(raw["username"]),
                login_at=as_utc(datetime.fromisoformat(raw["login_at"])),
                expires_at=as_utc(datetime.fromisoformat(raw["expires_at"])),
            )
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class LoginLockout:
    failed_attempts: int = 0
    locked_until: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "failed_attempts": self.failed_attempts,
            "locked_until": self.locked_until.isoformat() if self.locked_until else None,
        }

    @classmethod
    def from_dict(cls, raw) -> "LoginLockout":
        if not isinstance(raw, dict):
            return cls()
        try:
            attempts = int(raw.get("failed_attempts") or 0)
            until = raw.get("locked_until")
            return cls(
                failed_attempts=max(attempts, 0),
                locked_until=as_utc(datetime.fromisoformat(until)) if until else None,
            )
        except (TypeError, ValueError):
            return cls()


def is_session_expired(session: AdminSession | None, now: datetime) -> bool:
    if session is None:
        return True
    return now >= session.expires_at


def is_locked(lockout: LoginLockout, now: datetime) -> bool:
    return lockout.locked_until is not None and now < lockout.locked_until


def lockout_remaining(lockout: LoginLockout, now: datetime) -> timedelta:
    if not is_locked(lockout, now):
        return timedelta(0)
    return lockout.locked_until - now


def register_failure(
    lockout: LoginLockout, now: datetime, max_attempts: int, cooldown: timedelta
) -> LoginLockout:
    """Count a failed attempt; the max-th consecutive failure starts the cooldown."""
    if lockout.locked_until is not None and not is_locked(lockout, now):
        lockout = LoginLockout()
    attempts = lockout.failed_attempts + 1
    if attempts >= max_attempts:
        return replace(lockout, failed_attempts=attempts, locked_until=now + cooldown)
    return replace(lockout, failed_attempts=attempts)


def register_success() -> LoginLockout:
    return LoginLockout()


def load_admin_state(store) -> tuple[Optional[AdminSession], LoginLockout]:
    return (
        AdminSession.from_dict(store.get(SESSION_KEY)),
        LoginLockout.from_dict(store.get(LOCKOUT_KEY)),
    )


def save_session(store, session: AdminSession | None) -> None:
    if session is None:
        store.pop(SESSION_KEY, None)
    else:
        store[SESSION_KEY] = session.to_dict()


def save_lockout(store, lockout: LoginLockout) -> None:
    if lockout == LoginLockout():
        store.pop(LOCKOUT_KEY, None)
    else:
        store[LOCKOUT_KEY] = lockout.to_dict()
