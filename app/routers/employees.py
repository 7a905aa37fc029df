from fastapi import APIRouter, Depends

from app.dependencies import get_registry
from app.schemas.requests import EmployeeLoginRequest
from app.schemas.responses import EmployeeLoginResponse, EmployeeProfile, ErrorResponse
from app.services.accounts import AccountRegistry

router = APIRouter()


@router.post(
    "/login",
    response_model=EmployeeLoginResponse,
    responses={401: {"model": ErrorResponse}},
)
def login(request: EmployeeLoginRequest, registry: AccountRegistry = Depends(get_registry)):
    employee = registry.authenticate_employee(
        username=request.username,
        password=request.password,
    )
    return EmployeeLoginResponse(employee=EmployeeProfile.model_validate(employee))
