# =============================================================================
# core/models.py - Account audit data models
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple, Mapping
from enum import Enum


class AccountStatus(Enum):
    """Account state, priority Locked > Enabled > Disabled"""
    ENABLED = "Enabled"
    DISABLED = "Disabled"
    LOCKED = "Locked"


class UsageStatus(Enum):
    """Logon recency bucket"""
    ACTIVE_PC = "ActivePC"
    INFREQUENT = "Infrequent"
    STALE = "Stale"
    NEVER_LOGGED_IN = "NeverLoggedIn"
    ACTIVE_SYSTEM = "ActiveSystem"


class PasswordStatus(Enum):
    """Password expiry state"""
    VALID = "Valid"
    EXPIRED = "Expired"


def first_value(value: Any) -> Any:
    """Return the first value of a possibly multi-valued attribute"""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, bytes):
        value = value.decode('utf-8', errors='replace')
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_int(value: Any) -> Optional[int]:
    value = first_value(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_str(value: Any) -> Optional[str]:
    value = first_value(value)
    return str(value).strip() if value is not None else None


def _to_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    names = []
    for item in value:
        item = _to_str(item)
        if item:
            names.append(item)
    return names


@dataclass(frozen=True)
class RawAccountAttributes:
    """Sparse directory record; every attribute may be absent"""
    username: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    manager: Optional[str] = None
    user_account_control: Optional[int] = None
    lockout_time: Optional[int] = None
    last_logon_timestamp: Optional[int] = None
    password_expiry_time: Optional[int] = None
    primary_group_id: Optional[int] = None
    member_of: Tuple[str, ...] = ()
    when_created: Optional[str] = None

    # LDAP attribute name -> (field name, converter)
    LDAP_ATTRIBUTES = {
        'sAMAccountName': ('username', _to_str),
        'displayName': ('display_name', _to_str),
        'mail': ('email', _to_str),
        'department': ('department', _to_str),
        'title': ('title', _to_str),
        'description': ('description', _to_str),
        'manager': ('manager', _to_str),
        'userAccountControl': ('user_account_control', _to_int),
        'lockoutTime': ('lockout_time', _to_int),
        'lastLogonTimestamp': ('last_logon_timestamp', _to_int),
        'msDS-UserPasswordExpiryTimeComputed': ('password_expiry_time', _to_int),
        'primaryGroupID': ('primary_group_id', _to_int),
        'memberOf': ('member_of', lambda value: tuple(_to_str_list(value))),
        'whenCreated': ('when_created', _to_str),
    }

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any]) -> 'RawAccountAttributes':
        """Build a record from LDAP attribute names, keeping first values only"""
        values = {}
        for ldap_name, (field_name, convert) in cls.LDAP_ATTRIBUTES.items():
            if ldap_name in attributes:
                values[field_name] = convert(attributes[ldap_name])
        return cls(**values)


@dataclass(frozen=True)
class Account:
    """Classified account, built once per run"""
    sequence_number: int
    username: str
    display_name: str
    email: str
    department: str
    title: str
    manager: str
    description: str
    created_date: str
    status: AccountStatus
    usage_status: UsageStatus
    password_status: PasswordStatus
    is_admin: bool
    groups: Tuple[str, ...] = ()
    last_logon_display: str = "Never"
    days_since_logon: Optional[int] = None

    @property
    def is_enabled(self) -> bool:
        return self.status is AccountStatus.ENABLED

    def to_dict(self) -> Dict[str, Any]:
        """Convert Account to a serializable view record"""
        return {
            'sequence_number': self.sequence_number,
            'username': self.username,
            'display_name': self.display_name,
            'email': self.email,
            'department': self.department,
            'title': self.title,
            'manager': self.manager,
            'description': self.description,
            'created_date': self.created_date,
            'status': self.status.value,
            'usage_status': self.usage_status.value,
            'password_status': self.password_status.value,
            'is_admin': self.is_admin,
            'groups': list(self.groups),
            'last_logon_display': self.last_logon_display,
            'days_since_logon': self.days_since_logon,
        }


@dataclass(frozen=True)
class AggregateStats:
    """Run-wide counters and department histogram"""
    total: int = 0
    real_active: int = 0
    stale: int = 0
    never: int = 0
    locked: int = 0
    expired_password: int = 0
    departments: Tuple[Tuple[str, int], ...] = ()

    @property
    def department_labels(self) -> List[str]:
        return [name for name, _ in self.departments]

    @property
    def department_counts(self) -> List[int]:
        return [count for _, count in self.departments]

    def counters(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'real_active': self.real_active,
            'stale': self.stale,
            'never': self.never,
            'locked': self.locked,
            'expired_password': self.expired_password,
        }


@dataclass(frozen=True)
class ReportModel:
    """Final model handed to the report renderer"""
    generated_at: str
    accounts: Tuple[Account, ...] = ()
    stats: AggregateStats = field(default_factory=AggregateStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generated_at': self.generated_at,
            'accounts': [account.to_dict() for account in self.accounts],
            'stats': self.stats.counters(),
            'department_labels': self.stats.department_labels,
            'department_counts': self.stats.department_counts,
        }
