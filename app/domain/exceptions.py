"""Domain exceptions

Each subclasses ``ValueError`` so routes can keep catching ``ValueError`` for
input problems, and carries the HTTP status the API layer responds with.
"""

from typing import Any, Dict, Optional


class DomainError(ValueError):
    status_code = 400
    error = "Bad Request"

    def __init__(self, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}


class BadRequestError(DomainError):
    pass


class UnauthorizedError(DomainError):
    status_code = 401
    error = "Unauthorized"


class PaymentRequiredError(DomainError):
    status_code = 402
    error = "Payment Required"


class ForbiddenError(DomainError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(DomainError):
    status_code = 404
    error = "Not Found"


class ConflictError(DomainError):
    status_code = 409
    error = "Conflict"


class ExternalServiceError(DomainError):
    status_code = 502
    error = "Bad Gateway"


class ServiceUnavailableError(DomainError):
    status_code = 503
    error = "Service Unavailable"


class InsufficientCreditsError(ForbiddenError):
    """Raised by the credit ledger; reports turn it into a 402."""

    def __init__(self, message: str = "INSUFFICIENT_CREDITS"):
        super().__init__(message)


class ArchiveFailedError(DomainError):
    status_code = 500
    error = "Internal Server Error"
