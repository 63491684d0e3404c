# =============================================================================
# core/exceptions.py - Audit error types
# =============================================================================


class AccountAuditError(Exception):
    """Base class for account audit failures"""


class DirectoryQueryError(AccountAuditError):
    """Raised when the account record sequence cannot be obtained"""


class ConfigurationError(AccountAuditError):
    """Raised when required settings are missing"""
