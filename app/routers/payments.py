from fastapi import APIRouter, Depends, status

from app.dependencies import get_ledger
from app.schemas.requests import CreatePaymentRequest
from app.schemas.responses import ErrorResponse, PaymentCreatedResponse
from app.services.ledger import TransactionLedger

router = APIRouter()


@router.post(
    "/create",
    response_model=PaymentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def create_payment(request: CreatePaymentRequest, ledger: TransactionLedger = Depends(get_ledger)):
    """
    Create a payment request in state `pending`.

    Amount must be positive with at most two decimals, payee account 10-16
    digits and SWIFT code 8-11 digits. Only Rands (R) over SWIFT are accepted.
    """
    txn = ledger.create(
        customer_id=request.customer_id,
        amount=request.amount,
        currency=request.currency,
        provider=request.provider,
        payee_account=request.payee_account,
        swift_code=request.swift_code,
    )
    return PaymentCreatedResponse(transaction_id=txn.id)
