# =============================================================================
# core/rules.py - Classification rule tables
# =============================================================================

# Service and system mailbox accounts left out of the audit (prefix, any case)
EXCLUDED_USERNAME_PREFIXES = ("HealthMailbox", "SM_", "MSOL_")

# Group names granting domain-wide administration (exact, any case)
ADMIN_GROUP_NAMES = ("Domain Admins", "Enterprise Admins")

# Substrings marking a group as administrative (case-sensitive)
ADMIN_GROUP_MARKERS = ("Admin",)

# Well-known RID of Domain Admins when used as primaryGroupID
DOMAIN_ADMINS_GROUP_ID = 512
DOMAIN_ADMINS_GROUP_NAME = "Domain Admins"

# Leading marker on DN components (CN=Jane Doe,OU=...)
DN_MARKER = "CN="

# userAccountControl flags
UAC_ACCOUNTDISABLE = 0x2
UAC_NORMAL_ACCOUNT = 0x200

# Logon recency windows in days
ACTIVE_WINDOW_DAYS = 60
INFREQUENT_WINDOW_DAYS = 180

# lastLogonTimestamp years beyond now + this many years are sentinel data
FUTURE_YEAR_TOLERANCE = 5

DEFAULT_DEPARTMENT = "Unknown"
MISSING_VALUE = "-"
