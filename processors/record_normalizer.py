# =============================================================================
# processors/record_normalizer.py - Service account filter and field defaults
# =============================================================================

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ldap3.core.exceptions import LDAPInvalidDnError
from ldap3.utils.dn import parse_dn

from core.models import RawAccountAttributes
from core.rules import (
    EXCLUDED_USERNAME_PREFIXES, DEFAULT_DEPARTMENT, MISSING_VALUE, DN_MARKER
)
from utils.ad_time import parse_generalized_time


# runs of \XX hex escapes are UTF-8 bytes; \c escapes a single character
_DN_ESCAPE = re.compile(r'((?:\\[0-9A-Fa-f]{2})+)|\\(.)')


def _unescape_dn_value(value: str) -> str:
    def replace(match):
        if match.group(1):
            return bytes.fromhex(match.group(1).replace('\\', '')).decode('utf-8', errors='replace')
        return match.group(2)
    return _DN_ESCAPE.sub(replace, value)


def dn_leading_name(dn: str) -> str:
    """Return the value of the first RDN, dropping its CN= marker"""
    try:
        attribute_type, value, _ = parse_dn(dn, strip=True)[0]
    except LDAPInvalidDnError:
        # not a DN; fall back to the text before the first comma
        component = dn.split(',', 1)[0].strip()
        if component.upper().startswith(DN_MARKER):
            component = component[len(DN_MARKER):]
        return component

    value = _unescape_dn_value(value)
    if f"{attribute_type.upper()}=" == DN_MARKER:
        return value
    return f"{attribute_type}={value}"


@dataclass(frozen=True)
class NormalizedRecord:
    """Retained record with display fields resolved to their defaults"""
    raw: RawAccountAttributes
    username: str
    display_name: str
    email: str
    department: str
    title: str
    manager: str
    description: str
    created_date: str


class RecordNormalizer:
    """Drops service accounts and fills in missing display fields"""

    def __init__(self, excluded_prefixes: Sequence[str] = EXCLUDED_USERNAME_PREFIXES):
        self.excluded_prefixes = tuple(prefix.lower() for prefix in excluded_prefixes)
        self.excluded_count = 0
        self.logger = logging.getLogger(self.__class__.__name__)

    def reset(self) -> None:
        """Start a new run's exclusion count"""
        self.excluded_count = 0

    def is_excluded(self, username: Optional[str]) -> bool:
        """Check username against the service account prefix list"""
        if not username:
            return False
        return username.lower().startswith(self.excluded_prefixes)

    def normalize(self, raw: RawAccountAttributes) -> Optional[NormalizedRecord]:
        """Return the normalized record, or None for an excluded account"""
        if self.is_excluded(raw.username):
            self.excluded_count += 1
            self.logger.debug(f"Skipping service account {raw.username}")
            return None

        username = raw.username or ""
        created = parse_generalized_time(raw.when_created)

        return NormalizedRecord(
            raw=raw,
            username=username,
            display_name=raw.display_name or username,
            email=raw.email or MISSING_VALUE,
            department=raw.department or DEFAULT_DEPARTMENT,
            title=raw.title or MISSING_VALUE,
            manager=dn_leading_name(raw.manager) if raw.manager else MISSING_VALUE,
            description=raw.description or MISSING_VALUE,
            created_date=created.strftime("%Y-%m-%d") if created else MISSING_VALUE,
        )
