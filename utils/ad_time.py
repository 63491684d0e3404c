# =============================================================================
# utils/ad_time.py - Active Directory time conversions
# =============================================================================

from datetime import datetime, timedelta, timezone
from typing import Optional

# Windows NT time counts 100-nanosecond intervals since 1601-01-01 UTC
FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
TICKS_PER_SECOND = 10_000_000
TICKS_PER_YEAR = TICKS_PER_SECOND * 60 * 60 * 24 * 365.2425

# "Never expires" marker used by msDS-UserPasswordExpiryTimeComputed
FILETIME_NEVER = 0x7FFFFFFFFFFFFFFF


def filetime_to_datetime(ticks: int) -> datetime:
    """
    Convert Windows NT time to an aware UTC datetime.

    Raises OverflowError when the value lies past datetime.max.
    """
    return FILETIME_EPOCH + timedelta(microseconds=ticks // 10)


def filetime_year(ticks: int) -> int:
    """Calendar year of a tick count, also for values datetime cannot hold"""
    try:
        return filetime_to_datetime(ticks).year
    except OverflowError:
        return FILETIME_EPOCH.year + int(ticks / TICKS_PER_YEAR)


def datetime_to_filetime(value: datetime) -> int:
    """Convert an aware datetime back to Windows NT time"""
    delta = value - FILETIME_EPOCH
    return (delta.days * 86400 + delta.seconds) * TICKS_PER_SECOND + delta.microseconds * 10


def parse_generalized_time(value: Optional[str]) -> Optional[datetime]:
    """Parse LDAP generalized time such as 20230115103000.0Z"""
    if not value:
        return None
    try:
        return datetime.strptime(value[:14], "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return None
