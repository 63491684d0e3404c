# =============================================================================
# core/pipeline.py - Single-pass account audit workflow
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from core.models import Account, RawAccountAttributes, ReportModel
from processors.aggregator import AggregationEngine
from processors.classifier import ClassificationEngine
from processors.group_resolver import GroupMembershipResolver
from processors.record_normalizer import RecordNormalizer
from processors.report_builder import ReportModelBuilder


class AccountAuditPipeline:
    """Normalize, classify and aggregate directory accounts in one forward pass"""

    def __init__(self, now: Optional[datetime] = None,
                 normalizer: Optional[RecordNormalizer] = None,
                 group_resolver: Optional[GroupMembershipResolver] = None):
        now = now or datetime.now(timezone.utc)
        self.now = now if now.tzinfo else now.replace(tzinfo=timezone.utc)
        self.normalizer = normalizer or RecordNormalizer()
        self.classifier = ClassificationEngine(self.now, group_resolver)
        self.builder = ReportModelBuilder()
        self.logger = logging.getLogger(self.__class__.__name__)

    def process_partition(self, records: Iterable[RawAccountAttributes],
                          first_sequence: int = 1) -> Tuple[List[Account], AggregationEngine]:
        """Classify and aggregate one sequence of raw records"""
        accounts = []
        aggregator = AggregationEngine()
        sequence = first_sequence

        for raw in records:
            record = self.normalizer.normalize(raw)
            if record is None:
                continue

            account = self.classifier.classify(record, sequence)
            aggregator.add(account)
            accounts.append(account)
            sequence += 1

        return accounts, aggregator

    def run(self, records: Iterable[RawAccountAttributes]) -> ReportModel:
        """
        Consume the record sequence once and build the report model.

        Errors raised while iterating the records propagate unchanged, so no
        model is built from a partial sequence.
        """
        self.logger.info("Starting account audit")
        self.normalizer.reset()
        accounts, aggregator = self.process_partition(records)
        return self._build(accounts, aggregator)

    def run_partitioned(self, partitions: Iterable[Iterable[RawAccountAttributes]]) -> ReportModel:
        """Process partitions separately and merge the partial counters"""
        self.logger.info("Starting partitioned account audit")
        self.normalizer.reset()
        accounts: List[Account] = []
        merged = AggregationEngine()

        for partition in partitions:
            partial_accounts, partial = self.process_partition(partition, len(accounts) + 1)
            accounts.extend(partial_accounts)
            merged.merge(partial)

        return self._build(accounts, merged)

    def _build(self, accounts: List[Account], aggregator: AggregationEngine) -> ReportModel:
        stats = aggregator.finalize()
        self.log_statistics(stats)
        return self.builder.build(accounts, stats, self.now)

    def log_statistics(self, stats) -> None:
        self.logger.info(f"Excluded service accounts: {self.normalizer.excluded_count}")
        self.logger.info(f"Audit summary: {stats.counters()}")
        if stats.departments:
            top_name, top_count = stats.departments[0]
            self.logger.info(f"Departments: {len(stats.departments)} (largest: {top_name} with {top_count})")
