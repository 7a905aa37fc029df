from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RegisterResponse(CamelResponse):
    message: str = "Registration successful"
    customer_id: int


class CustomerProfile(CamelResponse):
    id: int
    username: str
    full_name: str
    account_number: str


class CustomerLoginResponse(CamelResponse):
    message: str = "Login successful"
    customer: CustomerProfile


class EmployeeProfile(CamelResponse):
    id: int
    username: str
    name: str
    role: str


class EmployeeLoginResponse(CamelResponse):
    message: str = "Login successful"
    employee: EmployeeProfile


class PaymentCreatedResponse(CamelResponse):
    message: str = "Payment created successfully"
    transaction_id: int


class TransactionListItem(CamelResponse):
    id: int
    customer_id: int
    amount: str  # kept as a string to avoid float rounding
    currency: str
    provider: str
    payee_account: str
    swift_code: str
    status: str
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    customer_name: str
    customer_username: str


class TransactionListResponse(CamelResponse):
    transactions: List[TransactionListItem]


class VerifyResponse(CamelResponse):
    message: str = "Transaction verified successfully"
    verified_at: datetime


class SubmitSwiftResponse(CamelResponse):
    message: str
    count: int


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: datetime


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    errors: Optional[List[FieldError]] = None
