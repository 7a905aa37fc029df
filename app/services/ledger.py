"""
Transaction ledger: the payment-record lifecycle.

    pending ──verify──▶ verified ──submit──▶ submitted

The ledger is the only code that writes Transaction.status. Every
transition is a single conditional UPDATE (... WHERE status = <expected>)
evaluated by the store, so of two concurrent attempts on the same record at
most one matches a row. There is no read-then-write and no application
lock. A transition whose precondition does not hold affects zero rows and
is reported to the caller, never applied.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import models
from app.database import store_errors
from app.errors import NotFoundError, NotFoundOrAlreadyVerified
from app.models import TransactionStatus, utcnow
from app.services.validation import FieldKind, sanitize, validate_fields

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: Dict[TransactionStatus, Optional[TransactionStatus]] = {
    TransactionStatus.PENDING: TransactionStatus.VERIFIED,
    TransactionStatus.VERIFIED: TransactionStatus.SUBMITTED,
    TransactionStatus.SUBMITTED: None,  # terminal
}


def can_transition(current: TransactionStatus, new: TransactionStatus) -> bool:
    return ALLOWED_TRANSITIONS.get(current) == new


class LedgerEntry:
    """A transaction together with its owner's display fields."""

    def __init__(self, transaction: models.Transaction, customer_name: str, customer_username: str):
        self.transaction = transaction
        self.customer_name = customer_name
        self.customer_username = customer_username


class TransactionLedger:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        customer_id: Union[int, str, None],
        amount: Optional[str],
        currency: Optional[str],
        provider: Optional[str],
        payee_account: Optional[str],
        swift_code: Optional[str],
    ) -> models.Transaction:
        """
        Record a new payment request in state `pending`.

        Raises:
            ValidationError: listing every malformed or missing field
            NotFoundError: if customer_id does not reference a customer
        """
        fields = validate_fields({
            "customerId": (FieldKind.RECORD_ID, customer_id),
            "amount": (FieldKind.AMOUNT, amount),
            "currency": (FieldKind.CURRENCY, currency),
            "provider": (FieldKind.PROVIDER, provider),
            "payeeAccount": (FieldKind.PAYEE_ACCOUNT, payee_account),
            "swiftCode": (FieldKind.SWIFT_CODE, swift_code),
        })
        customer_id = int(fields["customerId"])

        with store_errors("payment creation"):
            if self.db.get(models.Customer, customer_id) is None:
                raise NotFoundError(f"Customer {customer_id} not found")

            txn = models.Transaction(
                customer_id=customer_id,
                amount=Decimal(fields["amount"]),
                currency=fields["currency"],
                provider=fields["provider"],
                payee_account=fields["payeeAccount"],
                swift_code=fields["swiftCode"],
                status=TransactionStatus.PENDING.value,
                created_at=utcnow(),
            )
            self.db.add(txn)
            try:
                self.db.commit()
            except IntegrityError:
                # customer removed between the check and the insert
                self.db.rollback()
                raise NotFoundError(f"Customer {customer_id} not found")
            self.db.refresh(txn)

        logger.info(
            "Created transaction %s for customer %s: %s %s",
            txn.id, customer_id, txn.amount, txn.currency,
        )
        return txn

    def get(self, transaction_id: int) -> models.Transaction:
        with store_errors("transaction lookup"):
            txn = self.db.get(models.Transaction, transaction_id)
        if txn is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return txn

    def _transition(
        self,
        transaction_ids: Iterable[int],
        current: TransactionStatus,
        new: TransactionStatus,
        **values,
    ) -> int:
        """
        Move every listed record that is currently in `current` to `new`.

        Returns the number of records that actually changed state. Records in
        any other state are left untouched.
        """
        if not can_transition(current, new):
            logger.warning("Rejected transition %s -> %s", current.value, new.value)
            return 0

        ids = list(transaction_ids)
        if not ids:
            return 0

        stmt = (
            update(models.Transaction)
            .where(
                models.Transaction.id.in_(ids),
                models.Transaction.status == current.value,
            )
            .values(status=new.value, **values)
            .execution_options(synchronize_session=False)
        )
        with store_errors(f"{current.value} -> {new.value} transition"):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount

    def verify(self, transaction_id: int, employee_id: int, employee_name: str) -> datetime:
        """
        pending -> verified, recording who verified and when.

        Raises NotFoundOrAlreadyVerified when no pending record with that id
        exists. The store reports only "zero rows matched", so an unknown id
        and an already verified one are indistinguishable here.
        """
        verified_at = utcnow()
        count = self._transition(
            [transaction_id],
            TransactionStatus.PENDING,
            TransactionStatus.VERIFIED,
            verified_by=sanitize(employee_name),
            verified_by_id=employee_id,
            verified_at=verified_at,
        )
        if count == 0:
            raise NotFoundOrAlreadyVerified()
        return verified_at

    def mark_submitted(self, transaction_ids: Iterable[int], employee_id: int) -> int:
        """verified -> submitted for every eligible id, with one shared timestamp."""
        return self._transition(
            transaction_ids,
            TransactionStatus.VERIFIED,
            TransactionStatus.SUBMITTED,
            submitted_at=utcnow(),
            submitted_by_id=employee_id,
        )

    def list_all(self) -> List[LedgerEntry]:
        """All transactions, newest first, with the owning customer's name."""
        with store_errors("transaction listing"):
            rows = (
                self.db.query(
                    models.Transaction,
                    models.Customer.full_name,
                    models.Customer.username,
                )
                .join(models.Customer, models.Transaction.customer_id == models.Customer.id)
                .order_by(models.Transaction.created_at.desc(), models.Transaction.id.desc())
                .all()
            )
        return [LedgerEntry(txn, name, username) for txn, name, username in rows]
