# =============================================================================
# utils/json_source.py - Offline account records from a JSON export
# =============================================================================

import json
import logging
from typing import Iterator

from core.exceptions import DirectoryQueryError
from core.models import RawAccountAttributes


def iter_json_accounts(file_path: str) -> Iterator[RawAccountAttributes]:
    """
    Yield records from a JSON array of attribute objects keyed by LDAP
    attribute name, e.g. [{"sAMAccountName": "jdoe", "memberOf": [...]}].
    """
    logger = logging.getLogger(__name__)

    try:
        with open(file_path, 'r', encoding='utf-8-sig') as file:
            data = json.load(file)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading account export {file_path}: {e}")
        raise DirectoryQueryError(f"Cannot read account export {file_path}: {e}") from e

    if not isinstance(data, list):
        raise DirectoryQueryError(f"Account export {file_path} must contain a JSON array")

    logger.info(f"Loaded {len(data)} account records from {file_path}")

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise DirectoryQueryError(f"Record {index} in {file_path} is not an object")
        yield RawAccountAttributes.from_attributes(item)
