"""Share expiry rules."""

import math
import re
from datetime import datetime, timedelta
from typing import Final, Protocol

from django.utils import timezone

# Leading integer of a lifetime string: '24h' -> 24, '1.5' -> 1
_LEADING_INT: Final = re.compile(r'\s*([+-]?\d+)')


class _Expiring(Protocol):
    expires_at: datetime | None


def is_expired(share: _Expiring, now: datetime | None = None) -> bool:
    """Check whether a share is past its expiry.

    A share without expiry never expires. A share expiring exactly
    now is still valid.

    Args:
        share: Any record with an ``expires_at`` attribute.
        now: Reference time, defaults to the current time.

    Returns:
        True if the share must be treated as inaccessible.
    """
    if share.expires_at is None:
        return False
    return (now or timezone.now()) > share.expires_at


def parse_hours(raw: object) -> int | None:
    """Read a whole number of hours from request input.

    Numbers are truncated toward zero. Strings contribute their
    leading integer, so '24h' is 24 and '1.5' is 1.

    Args:
        raw: Lifetime as sent by the client.

    Returns:
        Whole hours, or None when no integer can be read.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        return int(match.group(1)) if match else None
    return None


def compute_expiry(
    expires_in_hours: object,
    now: datetime | None = None,
) -> datetime | None:
    """Turn a requested lifetime in hours into an expiry timestamp.

    Non-numeric, zero or negative values mean "no expiry".

    Args:
        expires_in_hours: Hours as number or string, or None.
        now: Reference time, defaults to the current time.

    Returns:
        Expiry timestamp or None.
    """
    hours = parse_hours(expires_in_hours)
    if hours is None or hours <= 0:
        return None
    return (now or timezone.now()) + timedelta(hours=hours)
