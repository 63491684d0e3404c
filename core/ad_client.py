# =============================================================================
# core/ad_client.py - Active Directory account source
# =============================================================================

import logging
from typing import Dict, Any, Iterator, Optional
from ldap3 import Server, Connection, ALL, SUBTREE
from ldap3.core.exceptions import LDAPException

from core.exceptions import DirectoryQueryError
from core.models import RawAccountAttributes

DEFAULT_SEARCH_FILTER = "(&(objectCategory=person)(objectClass=user))"


class ActiveDirectoryClient:
    """Active Directory client yielding raw account attribute records"""

    def __init__(self, server_url: str, username: str, password: str, base_dn: str,
                 use_ssl: bool = False, page_size: int = 500,
                 search_filter: str = DEFAULT_SEARCH_FILTER):
        self.server_url = server_url
        self.username = username
        self.password = password
        self.base_dn = base_dn
        self.use_ssl = use_ssl
        self.page_size = page_size
        self.search_filter = search_filter
        self.connection: Optional[Connection] = None
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()

    def connect(self) -> None:
        """Establish connection to Active Directory"""
        try:
            server = Server(self.server_url, use_ssl=self.use_ssl, get_info=ALL)
            self.connection = Connection(
                server,
                user=self.username,
                password=self.password,
                auto_bind=True,
                read_only=True,
                raise_exceptions=True
            )
            self.logger.info("Successfully connected to Active Directory")
        except LDAPException as e:
            self.logger.error(f"Failed to connect to AD: {e}")
            raise DirectoryQueryError(f"Failed to connect to {self.server_url}: {e}") from e

    def disconnect(self) -> None:
        """Close Active Directory connection"""
        if self.connection:
            self.connection.unbind()
            self.connection = None
            self.logger.info("Disconnected from Active Directory")

    def iter_accounts(self) -> Iterator[RawAccountAttributes]:
        """
        Page through user objects under the base DN.

        The generator is one-shot: pages are fetched as it is consumed, and
        any LDAP failure surfaces as DirectoryQueryError.
        """
        if not self.connection:
            raise DirectoryQueryError("Not connected to Active Directory")

        attributes = list(RawAccountAttributes.LDAP_ATTRIBUTES)
        count = 0

        try:
            entries = self.connection.extend.standard.paged_search(
                search_base=self.base_dn,
                search_filter=self.search_filter,
                search_scope=SUBTREE,
                attributes=attributes,
                paged_size=self.page_size,
                generator=True
            )

            for entry in entries:
                if entry.get('type') != 'searchResEntry':
                    continue
                count += 1
                yield RawAccountAttributes.from_attributes(
                    self._canonical_attributes(entry.get('raw_attributes', {}))
                )

            self._check_search_result()

        except LDAPException as e:
            self.logger.error(f"Error querying accounts under {self.base_dn}: {e}")
            raise DirectoryQueryError(f"Directory query failed: {e}") from e

        self.logger.info(f"Retrieved {count} account records from Active Directory")

    def _canonical_attributes(self, raw_attributes: Dict[str, Any]) -> Dict[str, Any]:
        """Map server-cased attribute names onto the requested names"""
        by_lower = {name.lower(): value for name, value in raw_attributes.items()}
        return {
            name: by_lower[name.lower()]
            for name in RawAccountAttributes.LDAP_ATTRIBUTES
            if name.lower() in by_lower
        }

    def _check_search_result(self) -> None:
        """Raise when the last search page did not complete successfully"""
        result = getattr(self.connection, 'result', None) or {}
        if result.get('result', 0) != 0:
            description = result.get('description') or result.get('result')
            message = result.get('message') or ''
            self.logger.error(f"Search under {self.base_dn} ended with {description} {message}".strip())
            raise DirectoryQueryError(f"Directory query failed: {description} {message}".strip())
