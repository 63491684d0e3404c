# =============================================================================
# utils/csv_utils.py - CSV utilities
# =============================================================================

import csv
from typing import List, Dict, Any, Iterable, Optional
import logging

from core.models import Account

ACCOUNT_FIELDNAMES = [
    'sequence_number', 'username', 'display_name', 'email', 'department', 'title',
    'manager', 'description', 'created_date', 'status', 'usage_status',
    'password_status', 'is_admin', 'last_logon_display', 'days_since_logon', 'groups'
]


class CSVHandler:
    """Utilities for writing audit results to CSV files"""

    @staticmethod
    def account_rows(accounts: Iterable[Account]) -> List[Dict[str, Any]]:
        """Flatten accounts into CSV rows, groups joined by '; '"""
        rows = []
        for account in accounts:
            row = account.to_dict()
            row['groups'] = '; '.join(account.groups)
            if row['days_since_logon'] is None:
                row['days_since_logon'] = ''
            rows.append(row)
        return rows

    @staticmethod
    def write_csv(data: List[Dict[str, Any]], output_path: str,
                  fieldnames: Optional[List[str]] = None) -> None:
        """Write data to CSV file"""
        logger = logging.getLogger(__name__)

        if not data:
            logger.warning("No data to write")
            return

        if fieldnames is None:
            fieldnames = list(data[0].keys())

        try:
            with open(output_path, 'w', newline='', encoding='utf-8') as file:
                writer = csv.DictWriter(file, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(data)

            logger.info(f"Successfully wrote {len(data)} records to {output_path}")

        except Exception as e:
            logger.error(f"Error writing CSV: {e}")
            raise

    @classmethod
    def write_accounts(cls, accounts: Iterable[Account], output_path: str) -> None:
        cls.write_csv(cls.account_rows(accounts), output_path, ACCOUNT_FIELDNAMES)
