# =============================================================================
# processors/group_resolver.py - Direct group membership resolution
# =============================================================================

from typing import Iterable, List, Optional, Sequence

from core.rules import (
    ADMIN_GROUP_NAMES, ADMIN_GROUP_MARKERS,
    DOMAIN_ADMINS_GROUP_ID, DOMAIN_ADMINS_GROUP_NAME
)
from processors.record_normalizer import dn_leading_name


class GroupMembershipResolver:
    """Flattens memberOf DNs into group names and detects admin membership"""

    def __init__(self, admin_names: Sequence[str] = ADMIN_GROUP_NAMES,
                 admin_markers: Sequence[str] = ADMIN_GROUP_MARKERS):
        self.admin_names = {name.lower() for name in admin_names}
        self.admin_markers = tuple(admin_markers)

    def resolve(self, member_of: Iterable[str], primary_group_id: Optional[int]) -> List[str]:
        """
        Group names in membership order, followed by Domain Admins when the
        primary group is 512. Duplicates are kept.
        """
        groups = [dn_leading_name(dn) for dn in member_of]
        if primary_group_id == DOMAIN_ADMINS_GROUP_ID:
            groups.append(DOMAIN_ADMINS_GROUP_NAME)
        return groups

    def is_admin_group(self, group: str) -> bool:
        if group.lower() in self.admin_names:
            return True
        return any(marker in group for marker in self.admin_markers)

    def is_admin(self, groups: Iterable[str], primary_group_id: Optional[int]) -> bool:
        """Direct membership only; nested groups are not expanded"""
        if primary_group_id == DOMAIN_ADMINS_GROUP_ID:
            return True
        return any(self.is_admin_group(group) for group in groups)
