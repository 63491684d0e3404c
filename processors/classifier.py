# =============================================================================
# processors/classifier.py - Per-account status, usage and password rules
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from core.models import Account, AccountStatus, UsageStatus, PasswordStatus
from core.rules import (
    UAC_ACCOUNTDISABLE, UAC_NORMAL_ACCOUNT,
    ACTIVE_WINDOW_DAYS, INFREQUENT_WINDOW_DAYS, FUTURE_YEAR_TOLERANCE
)
from processors.group_resolver import GroupMembershipResolver
from processors.record_normalizer import NormalizedRecord
from utils.ad_time import filetime_to_datetime, filetime_year

NEVER_DISPLAY = "Never"
SYSTEM_DISPLAY = "System/Service"
UNAVAILABLE_DISPLAY = "N/A"


class ClassificationEngine:
    """Derives the terminal classifications of one account"""

    def __init__(self, now: Optional[datetime] = None,
                 group_resolver: Optional[GroupMembershipResolver] = None):
        now = now or datetime.now(timezone.utc)
        self.now = now if now.tzinfo else now.replace(tzinfo=timezone.utc)
        self.group_resolver = group_resolver or GroupMembershipResolver()
        self.logger = logging.getLogger(self.__class__.__name__)

    def classify_status(self, user_account_control: Optional[int],
                        lockout_time: Optional[int]) -> AccountStatus:
        """Locked overrides the disabled bit of userAccountControl"""
        if lockout_time is not None and lockout_time > 0:
            return AccountStatus.LOCKED

        flags = UAC_NORMAL_ACCOUNT if user_account_control is None else user_account_control
        if flags & UAC_ACCOUNTDISABLE:
            return AccountStatus.DISABLED
        return AccountStatus.ENABLED

    def classify_usage(self, last_logon_timestamp: Optional[int]) -> Tuple[UsageStatus, str, Optional[int]]:
        """Return (usage status, display text, days since logon)"""
        if last_logon_timestamp is None or last_logon_timestamp <= 0:
            return UsageStatus.NEVER_LOGGED_IN, NEVER_DISPLAY, None

        # Some directories report lastLogonTimestamp far in the future for
        # system accounts; those values carry no recency information.
        if filetime_year(last_logon_timestamp) > self.now.year + FUTURE_YEAR_TOLERANCE:
            return UsageStatus.ACTIVE_SYSTEM, SYSTEM_DISPLAY, None

        last_logon = filetime_to_datetime(last_logon_timestamp)
        diff = (self.now - last_logon).days

        if diff < 0:
            display, days = UNAVAILABLE_DISPLAY, None
        else:
            display, days = last_logon.strftime("%Y-%m-%d %H:%M"), diff

        if diff <= ACTIVE_WINDOW_DAYS:
            return UsageStatus.ACTIVE_PC, display, days
        if diff <= INFREQUENT_WINDOW_DAYS:
            return UsageStatus.INFREQUENT, display, days
        return UsageStatus.STALE, display, days

    def classify_password(self, password_expiry_time: Optional[int]) -> PasswordStatus:
        """
        Expired for any expiry time earlier than now, including 0 (change at
        next logon). Absent or unrepresentable values are Valid.
        """
        if password_expiry_time is None:
            return PasswordStatus.VALID
        try:
            expires = filetime_to_datetime(password_expiry_time)
        except OverflowError:
            return PasswordStatus.VALID
        return PasswordStatus.EXPIRED if expires < self.now else PasswordStatus.VALID

    def classify(self, record: NormalizedRecord, sequence_number: int) -> Account:
        """Build the immutable Account for a retained record"""
        raw = record.raw
        groups = self.group_resolver.resolve(raw.member_of, raw.primary_group_id)
        usage_status, last_logon_display, days_since_logon = self.classify_usage(raw.last_logon_timestamp)

        return Account(
            sequence_number=sequence_number,
            username=record.username,
            display_name=record.display_name,
            email=record.email,
            department=record.department,
            title=record.title,
            manager=record.manager,
            description=record.description,
            created_date=record.created_date,
            status=self.classify_status(raw.user_account_control, raw.lockout_time),
            usage_status=usage_status,
            password_status=self.classify_password(raw.password_expiry_time),
            is_admin=self.group_resolver.is_admin(groups, raw.primary_group_id),
            groups=tuple(groups),
            last_logon_display=last_logon_display,
            days_since_logon=days_since_logon,
        )
