"""
Request bodies.

Form fields are typed loosely (optional strings) on purpose: syntax rules
and presence checks live in app.services.validation so that every bad or
missing field of a request is reported together, with the same error shape,
instead of pydantic stopping at types.
"""
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.services.validation import MAX_RECORD_ID

RecordId = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class RegisterCustomerRequest(CamelModel):
    full_name: Optional[str] = None
    id_number: Optional[str] = None
    account_number: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class CustomerLoginRequest(CamelModel):
    username: str
    account_number: str
    password: str


class EmployeeLoginRequest(CamelModel):
    username: str
    password: str


class CreatePaymentRequest(CamelModel):
    customer_id: Optional[str] = None
    amount: Optional[str] = None
    currency: Optional[str] = None
    provider: Optional[str] = None
    payee_account: Optional[str] = None
    swift_code: Optional[str] = None


class VerifyTransactionRequest(CamelModel):
    employee_id: RecordId
    employee_name: str


class SubmitSwiftRequest(CamelModel):
    transaction_ids: List[RecordId]
    employee_id: RecordId

    @field_validator("transaction_ids")
    @classmethod
    def validate_ids(cls, v):
        # an empty list is rejected by the workflow as EmptyBatch
        if len(v) > 500:
            raise ValueError("Maximum 500 transaction IDs per request")
        return v
