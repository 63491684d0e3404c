# =============================================================================
# utils/excel_export.py - Multi-sheet Excel export of the audit
# =============================================================================

import logging

import pandas as pd

from core.models import ReportModel, AccountStatus, UsageStatus
from utils.csv_utils import CSVHandler, ACCOUNT_FIELDNAMES


class ExcelReportExporter:
    """Writes the report model to an Excel workbook with analysis sheets"""

    def __init__(self, model: ReportModel):
        self.model = model
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_accounts(self) -> pd.DataFrame:
        rows = CSVHandler.account_rows(self.model.accounts)
        return pd.DataFrame(rows, columns=ACCOUNT_FIELDNAMES)

    def get_summary(self) -> pd.DataFrame:
        counters = self.model.stats.counters()
        return pd.DataFrame({'Metric': list(counters), 'Count': list(counters.values())})

    def get_departments(self) -> pd.DataFrame:
        return pd.DataFrame({
            'Department': self.model.stats.department_labels,
            'Accounts': self.model.stats.department_counts,
        })

    def get_admins(self) -> pd.DataFrame:
        accounts = self.get_accounts()
        return accounts[accounts['is_admin'] == True]

    def get_stale_enabled(self) -> pd.DataFrame:
        """Enabled accounts with no logon in the stale window, oldest first"""
        accounts = self.get_accounts()
        stale = accounts[
            (accounts['status'] == AccountStatus.ENABLED.value) &
            (accounts['usage_status'] == UsageStatus.STALE.value)
        ].copy()
        stale['days_since_logon'] = pd.to_numeric(stale['days_since_logon'], errors='coerce')
        return stale.sort_values('days_since_logon', ascending=False)

    def export(self, output_path: str) -> None:
        """Export all sheets to one workbook"""
        try:
            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                self.get_accounts().to_excel(writer, sheet_name='Accounts', index=False)
                self.get_summary().to_excel(writer, sheet_name='Summary', index=False)
                self.get_departments().to_excel(writer, sheet_name='Departments', index=False)
                self.get_admins().to_excel(writer, sheet_name='Admins', index=False)
                self.get_stale_enabled().to_excel(writer, sheet_name='Stale_Enabled', index=False)
        except Exception as e:
            self.logger.error(f"Error writing Excel report: {e}")
            raise

        self.logger.info(f"Exported {len(self.model.accounts)} accounts to {output_path}")
