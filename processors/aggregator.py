# =============================================================================
# processors/aggregator.py - Run-wide counters and department histogram
# =============================================================================

from typing import Dict

from core.models import Account, AggregateStats, AccountStatus, UsageStatus, PasswordStatus


class AggregationEngine:
    """
    Accumulates the six account counters and the department histogram.

    Counters are independent predicates, so one account may increment several
    of them. Partial engines from separate partitions combine with merge();
    the histogram is only ordered by finalize().
    """

    def __init__(self):
        self.total = 0
        self.real_active = 0
        self.stale = 0
        self.never = 0
        self.locked = 0
        self.expired_password = 0
        # dict keeps first-seen order for the tie-break
        self.department_counts: Dict[str, int] = {}

    def add(self, account: Account) -> None:
        self.total += 1

        if account.usage_status is UsageStatus.ACTIVE_PC and account.is_enabled:
            self.real_active += 1
        if account.usage_status is UsageStatus.STALE and account.is_enabled:
            self.stale += 1
        if account.usage_status is UsageStatus.NEVER_LOGGED_IN:
            self.never += 1
        if account.status is AccountStatus.LOCKED:
            self.locked += 1
        if account.password_status is PasswordStatus.EXPIRED:
            self.expired_password += 1

        self.department_counts[account.department] = self.department_counts.get(account.department, 0) + 1

    def merge(self, other: 'AggregationEngine') -> 'AggregationEngine':
        """Fold another partial result into this one"""
        self.total += other.total
        self.real_active += other.real_active
        self.stale += other.stale
        self.never += other.never
        self.locked += other.locked
        self.expired_password += other.expired_password
        for department, count in other.department_counts.items():
            self.department_counts[department] = self.department_counts.get(department, 0) + count
        return self

    def finalize(self) -> AggregateStats:
        """Freeze counters; departments by count descending, first-seen on ties"""
        departments = sorted(self.department_counts.items(), key=lambda item: -item[1])
        return AggregateStats(
            total=self.total,
            real_active=self.real_active,
            stale=self.stale,
            never=self.never,
            locked=self.locked,
            expired_password=self.expired_password,
            departments=tuple(departments),
        )
