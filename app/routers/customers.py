from fastapi import APIRouter, Depends, status

from app.dependencies import get_registry
from app.schemas.requests import CustomerLoginRequest, RegisterCustomerRequest
from app.schemas.responses import (
    CustomerLoginResponse,
    CustomerProfile,
    ErrorResponse,
    RegisterResponse,
)
from app.services.accounts import AccountRegistry

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def register(request: RegisterCustomerRequest, registry: AccountRegistry = Depends(get_registry)):
    """
    Register a customer.

    All fields are validated together; a 400 lists every invalid field.
    A taken username is reported as DuplicateUsername.
    """
    customer = registry.register_customer(
        full_name=request.full_name,
        id_number=request.id_number,
        account_number=request.account_number,
        username=request.username,
        password=request.password,
    )
    return RegisterResponse(customer_id=customer.id)


@router.post(
    "/login",
    response_model=CustomerLoginResponse,
    responses={401: {"model": ErrorResponse}},
)
def login(request: CustomerLoginRequest, registry: AccountRegistry = Depends(get_registry)):
    """Username and account number must belong to the same customer."""
    customer = registry.authenticate_customer(
        username=request.username,
        account_number=request.account_number,
        password=request.password,
    )
    return CustomerLoginResponse(customer=CustomerProfile.model_validate(customer))
