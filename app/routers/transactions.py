from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.dependencies import get_ledger, get_workflow
from app.models import Transaction
from app.schemas.requests import SubmitSwiftRequest, VerifyTransactionRequest
from app.schemas.responses import (
    ErrorResponse,
    SubmitSwiftResponse,
    TransactionListItem,
    TransactionListResponse,
    VerifyResponse,
)
from app.services.ledger import TransactionLedger
from app.services.validation import MAX_RECORD_ID
from app.services.workflow import VerificationWorkflow

router = APIRouter()

TransactionId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


def _list_item(txn: Transaction, customer_name: str, customer_username: str) -> TransactionListItem:
    return TransactionListItem(
        id=txn.id,
        customer_id=txn.customer_id,
        amount=f"{txn.amount:.2f}",
        currency=txn.currency,
        provider=txn.provider,
        payee_account=txn.payee_account,
        swift_code=txn.swift_code,
        status=txn.status,
        verified_by=txn.verified_by,
        verified_at=txn.verified_at,
        submitted_at=txn.submitted_at,
        created_at=txn.created_at,
        customer_name=customer_name,
        customer_username=customer_username,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(ledger: TransactionLedger = Depends(get_ledger)):
    """All transactions, most recent first, with the owning customer's name."""
    return TransactionListResponse(transactions=[
        _list_item(e.transaction, e.customer_name, e.customer_username) for e in ledger.list_all()
    ])


@router.get(
    "/transaction/{transaction_id}",
    response_model=TransactionListItem,
    responses={404: {"model": ErrorResponse}},
)
def get_transaction(
    transaction_id: TransactionId,
    ledger: TransactionLedger = Depends(get_ledger),
):
    """Current state of a single transaction."""
    txn = ledger.get(transaction_id)
    return _list_item(txn, txn.customer.full_name, txn.customer.username)


@router.put(
    "/transaction/{transaction_id}/verify",
    response_model=VerifyResponse,
    responses={400: {"model": ErrorResponse}},
)
def verify_transaction(
    transaction_id: TransactionId,
    request: VerifyTransactionRequest,
    workflow: VerificationWorkflow = Depends(get_workflow),
):
    """
    Mark a pending transaction as verified.

    Only succeeds once per transaction. An unknown id and an already
    verified transaction both return 400 NotFoundOrAlreadyVerified.
    """
    verified_at = workflow.verify_transaction(
        transaction_id, request.employee_id, request.employee_name
    )
    return VerifyResponse(verified_at=verified_at)


@router.post(
    "/transactions/submit-swift",
    response_model=SubmitSwiftResponse,
    responses={400: {"model": ErrorResponse}},
)
def submit_swift(request: SubmitSwiftRequest, workflow: VerificationWorkflow = Depends(get_workflow)):
    """
    Submit verified transactions to SWIFT.

    Ids that are not currently verified are skipped, so `count` is the
    number actually submitted and resubmitting a batch returns 0.
    """
    result = workflow.submit_batch(request.transaction_ids, request.employee_id)
    return SubmitSwiftResponse(message=result.message, count=result.submitted)
