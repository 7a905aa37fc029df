"""
Employee-driven verification and SWIFT batch submission.

submit_batch is idempotent: ids that are not currently `verified` (never
verified, or already submitted) are skipped rather than rejected, so sending
the same batch twice transitions nothing the second time and reports a
count of 0.
"""
import logging
from datetime import datetime
from typing import List

from app.errors import EmptyBatch, NotFoundOrAlreadyVerified
from app.services.ledger import TransactionLedger

logger = logging.getLogger(__name__)


class SubmissionResult:
    def __init__(self, requested: int, submitted: int):
        self.requested = requested
        self.submitted = submitted

    @property
    def skipped(self) -> int:
        return self.requested - self.submitted

    @property
    def message(self) -> str:
        return f"{self.submitted} transaction(s) submitted to SWIFT"


class VerificationWorkflow:
    def __init__(self, ledger: TransactionLedger):
        self.ledger = ledger

    def verify_transaction(self, transaction_id: int, employee_id: int, employee_name: str) -> datetime:
        try:
            verified_at = self.ledger.verify(transaction_id, employee_id, employee_name)
        except NotFoundOrAlreadyVerified:
            logger.info(
                "Employee %s could not verify transaction %s", employee_id, transaction_id
            )
            raise
        logger.info("Transaction %s verified by employee %s", transaction_id, employee_id)
        return verified_at

    def submit_batch(self, transaction_ids: List[int], employee_id: int) -> SubmissionResult:
        """
        Raises:
            EmptyBatch: if no ids were given
        """
        if not transaction_ids:
            raise EmptyBatch()

        unique_ids = set(transaction_ids)
        count = self.ledger.mark_submitted(unique_ids, employee_id)
        result = SubmissionResult(requested=len(unique_ids), submitted=count)

        logger.info(
            "Employee %s submitted %d of %d transaction(s) to SWIFT",
            employee_id, result.submitted, result.requested,
        )
        return result
