from datetime import datetime, timedelta, timezone

from core.models import RawAccountAttributes
from utils.ad_time import datetime_to_filetime

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def ticks_days_ago(days: float) -> int:
    return datetime_to_filetime(NOW - timedelta(days=days))


def make_raw(**overrides) -> RawAccountAttributes:
    values = {
        'username': 'jdoe',
        'display_name': 'Jane Doe',
        'department': 'Finance',
        'user_account_control': 512,
        'last_logon_timestamp': ticks_days_ago(10),
    }
    values.update(overrides)
    return RawAccountAttributes(**values)


