import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import engine, init_db
from app.errors import InternalError, PortalError, ValidationError
from app.schemas.responses import HealthResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(engine)
    logger.info("Payment portal started (debug=%s)", settings.debug)
    yield
    engine.dispose()
    logger.info("Payment portal stopped")


app = FastAPI(
    title="Payment Verification Portal API",
    description="Customers submit payments, employees verify them and submit verified batches to SWIFT",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _field_name(loc) -> str:
    # ("body", "transactionIds", 0) -> "transactionIds"
    return next((p for p in reversed(loc) if isinstance(p, str)), "body")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same 400 shape as field validation failures."""
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err["msg"]}
        for err in exc.errors()
    ]
    error = ValidationError(errors)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(timestamp=datetime.now(timezone.utc))


from app.routers import customers, employees, payments, transactions  # noqa: E402
app.include_router(customers.router, prefix="/api/customer", tags=["customers"])
app.include_router(employees.router, prefix="/api/employee", tags=["employees"])
app.include_router(payments.router, prefix="/api/payment", tags=["payments"])
app.include_router(transactions.router, prefix="/api", tags=["transactions"])
