"""
Error taxonomy for the payment portal.

Every error carries the HTTP status it maps to and a stable `code` that
clients can switch on. Handlers in app.main render them as JSON.
"""
from typing import Dict, List, Optional


class PortalError(Exception):
    status_code = 500
    code = "InternalError"
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> Dict:
        return {"error": self.message, "code": self.code}


class ValidationError(PortalError):
    """Caller-correctable input problem with per-field detail."""

    status_code = 400
    code = "ValidationError"
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

    def to_dict(self) -> Dict:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class EmptyBatch(ValidationError):
    code = "EmptyBatch"
    message = "No transactions to submit"

    def __init__(self):
        super().__init__(
            [{"field": "transactionIds", "message": "At least one transaction id is required"}]
        )


class AuthenticationError(PortalError):
    """Unknown identity or wrong secret. The message never says which."""

    status_code = 401
    code = "InvalidCredentials"
    message = "Invalid credentials"

    def __init__(self):
        super().__init__()


class ConflictError(PortalError):
    status_code = 400
    code = "Conflict"
    message = "Request conflicts with current state"


class DuplicateUsername(ConflictError):
    code = "DuplicateUsername"
    message = "Username already exists"


class NotFoundOrAlreadyVerified(ConflictError):
    code = "NotFoundOrAlreadyVerified"
    message = "Transaction not found or already verified"


class NotFoundError(PortalError):
    status_code = 404
    code = "NotFound"
    message = "Resource not found"


class TransientStoreError(PortalError):
    """Store timeout or connection exhaustion. Safe to retry with backoff."""

    status_code = 503
    code = "TransientStoreError"
    message = "Service temporarily unavailable, please retry"


class InternalError(PortalError):
    """Unexpected failure. Rendered without detail."""
