import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Union

from account_registry import AccountRegistry
from csv_reader import read_transactions
from dispute_tracker import DisputeTracker
from exceptions import MalformedRecordError
from models import ClientAccount, ProcessingReport, ProcessingResult, ProcessingStats, Transaction, TransactionRow
from transaction_processor import TransactionProcessor
from validation import parse_transaction

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Drives input rows through validation and the transaction processor, in order.
    Every row yields one ProcessingReport; bad rows never stop the run.
    """

    def __init__(self):
        self._accounts = AccountRegistry()
        self._disputes = DisputeTracker()
        self._processor = TransactionProcessor(self._accounts, self._disputes)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def accounts(self) -> AccountRegistry:
        return self._accounts

    def process_file(self, filepath: Union[str, Path]) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        # Undecodable bytes become U+FFFD, which validation rejects per row.
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            for _ in self.process_records(read_transactions(f)):
                pass

        logger.info(str(self._stats))
        return self._accounts.snapshot()

    def process_records(self, rows: Iterable[TransactionRow]) -> Iterator[ProcessingReport]:
        """Validate and apply each row, yielding its outcome as soon as it is known."""
        for row in rows:
            report = self._process_row(row)
            self._stats.record(report.result)
            yield report

    def _process_row(self, row: TransactionRow) -> ProcessingReport:
        try:
            transaction = parse_transaction(row)
        except MalformedRecordError as e:
            logger.error(f"Line {row.line_number}: skipping malformed row: {e}")
            return ProcessingReport(row=row, transaction=None, result=ProcessingResult.MALFORMED, detail=str(e))

        return self._apply(transaction, row)

    def apply(self, transaction: Transaction) -> ProcessingReport:
        """Apply an already validated transaction."""
        report = self._apply(transaction, None)
        self._stats.record(report.result)
        return report

    def _apply(self, transaction: Transaction, row: Optional[TransactionRow]) -> ProcessingReport:
        logger.debug(f"Applying {transaction!r}")
        result = self._processor.process_transaction(transaction)

        if result.is_rejection:
            logger.warning(f"Transaction skipped: {transaction!r}, reason: {result.value}")
            account = self._accounts.get(transaction.client_id)
            if account is not None:
                logger.debug(f"  Related account: {account}")

        return ProcessingReport(row=row, transaction=transaction, result=result)
