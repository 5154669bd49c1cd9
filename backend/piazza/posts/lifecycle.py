"""
Post lifecycle: expiry-derived status, time left and lifetime coercion.

Status is never stored. Everything here is a pure function of ``expires_at``
and the time passed in, so a post's classification always follows the clock.
All datetimes are naive UTC.
"""
import enum
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..core.errors import ValidationError

DEFAULT_LIFETIME_MINUTES = 5


class PostStatus(str, enum.Enum):
    LIVE = "Live"
    EXPIRED = "Expired"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the engine's single clock."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_expired(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    if now is None:
        now = utcnow()
    return expires_at <= now


def derive_status(expires_at: datetime, now: Optional[datetime] = None) -> PostStatus:
    return PostStatus.EXPIRED if is_expired(expires_at, now) else PostStatus.LIVE


def time_left_seconds(expires_at: datetime, now: Optional[datetime] = None) -> int:
    """Whole seconds until expiry, floored, never negative."""
    if now is None:
        now = utcnow()
    remaining = (expires_at - now).total_seconds()
    return max(0, math.floor(remaining))


def resolve_lifetime_minutes(value: Any, default: float = DEFAULT_LIFETIME_MINUTES) -> float:
    """
    Coerce a caller-supplied lifetime to a positive number of minutes.

    Numbers and numeric strings are accepted. Anything missing, non-numeric,
    NaN, infinite, zero or negative falls back to ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(minutes) or minutes <= 0:
        return default
    return minutes


def compute_expires_at(
    lifetime_minutes: Any,
    now: Optional[datetime] = None,
    default: float = DEFAULT_LIFETIME_MINUTES,
) -> datetime:
    if now is None:
        now = utcnow()
    try:
        return now + timedelta(minutes=resolve_lifetime_minutes(lifetime_minutes, default))
    except OverflowError:
        raise ValidationError("expiresInMinutes is too large")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a stored naive datetime for rendering."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
