from datetime import datetime

from core.models import AccountStatus, UsageStatus, PasswordStatus
from processors.classifier import ClassificationEngine
from processors.record_normalizer import RecordNormalizer
from tests.helpers import NOW, make_raw, ticks_days_ago
from utils.ad_time import FILETIME_NEVER, datetime_to_filetime


def classify(now, **overrides):
    record = RecordNormalizer().normalize(make_raw(**overrides))
    return ClassificationEngine(now).classify(record, 1)


def test_enabled_recent_logon(now) -> None:
    account = classify(now, last_logon_timestamp=ticks_days_ago(10))

    assert account.status is AccountStatus.ENABLED
    assert account.usage_status is UsageStatus.ACTIVE_PC
    assert account.password_status is PasswordStatus.VALID
    assert account.days_since_logon == 10
    assert account.last_logon_display == '2026-10-09 12:00'


def test_usage_thresholds(now) -> None:
    assert classify(now, last_logon_timestamp=ticks_days_ago(60)).usage_status is UsageStatus.ACTIVE_PC
    assert classify(now, last_logon_timestamp=ticks_days_ago(61)).usage_status is UsageStatus.INFREQUENT
    assert classify(now, last_logon_timestamp=ticks_days_ago(180)).usage_status is UsageStatus.INFREQUENT
    assert classify(now, last_logon_timestamp=ticks_days_ago(181)).usage_status is UsageStatus.STALE
    assert classify(now, last_logon_timestamp=ticks_days_ago(200)).usage_status is UsageStatus.STALE


def test_never_logged_in(now) -> None:
    for value in (None, 0, -5):
        account = classify(now, last_logon_timestamp=value)
        assert account.usage_status is UsageStatus.NEVER_LOGGED_IN
        assert account.last_logon_display == 'Never'
        assert account.days_since_logon is None


def test_corrupted_future_year_is_active_system(now) -> None:
    far_future = datetime_to_filetime(NOW.replace(year=NOW.year + 10))

    account = classify(now, last_logon_timestamp=far_future)

    assert account.usage_status is UsageStatus.ACTIVE_SYSTEM
    assert account.days_since_logon is None
    assert account.last_logon_display == 'System/Service'


def test_unrepresentable_logon_is_active_system(now) -> None:
    assert classify(now, last_logon_timestamp=FILETIME_NEVER).usage_status is UsageStatus.ACTIVE_SYSTEM


def test_near_future_logon_is_unavailable_but_active(now) -> None:
    account = classify(now, last_logon_timestamp=ticks_days_ago(-30))

    assert account.usage_status is UsageStatus.ACTIVE_PC
    assert account.days_since_logon is None
    assert account.last_logon_display == 'N/A'


def test_within_tolerance_year_is_not_corrupted(now) -> None:
    edge = datetime_to_filetime(NOW.replace(year=NOW.year + 5))

    assert classify(now, last_logon_timestamp=edge).usage_status is UsageStatus.ACTIVE_PC


def test_status_from_account_control(now) -> None:
    assert classify(now, user_account_control=514).status is AccountStatus.DISABLED
    assert classify(now, user_account_control=66048).status is AccountStatus.ENABLED
    assert classify(now, user_account_control=None).status is AccountStatus.ENABLED


def test_lockout_overrides_enabled_and_disabled(now) -> None:
    assert classify(now, lockout_time=ticks_days_ago(1)).status is AccountStatus.LOCKED
    assert classify(now, user_account_control=514, lockout_time=1).status is AccountStatus.LOCKED
    assert classify(now, lockout_time=0).status is AccountStatus.ENABLED


def test_password_expiry(now) -> None:
    assert classify(now, password_expiry_time=ticks_days_ago(3)).password_status is PasswordStatus.EXPIRED
    assert classify(now, password_expiry_time=ticks_days_ago(-3)).password_status is PasswordStatus.VALID
    assert classify(now, password_expiry_time=None).password_status is PasswordStatus.VALID
    assert classify(now, password_expiry_time=0).password_status is PasswordStatus.EXPIRED
    assert classify(now, password_expiry_time=FILETIME_NEVER).password_status is PasswordStatus.VALID


def test_primary_group_admin_without_memberships(now) -> None:
    account = classify(now, primary_group_id=512, member_of=())

    assert account.is_admin
    assert account.groups == ('Domain Admins',)


def test_admin_via_membership(now) -> None:
    account = classify(now, primary_group_id=513, member_of=('CN=Exchange Admins,OU=Groups,DC=corp',))

    assert account.is_admin
    assert account.groups == ('Exchange Admins',)


def test_naive_clock_is_treated_as_utc() -> None:
    engine = ClassificationEngine(datetime(2026, 10, 19, 12, 0, 0))

    assert engine.now == NOW
