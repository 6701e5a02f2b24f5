"""
Domain-specific exceptions for the Payment Risk Monitor API.

These exceptions represent business logic violations and are mapped
to appropriate HTTP status codes in the API layer.
"""

from typing import Any


class RiskMonitorError(Exception):
    """Base exception for all risk monitor domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RiskMonitorError):
    """
    Raised when input data fails validation.

    Examples:
    - Required field missing
    - Review action other than mark_safe / mark_fraud
    - Pagination limit outside 1..1000

    HTTP Status: 400 Bad Request
    """

    pass


class NotFoundError(RiskMonitorError):
    """
    Raised when a lookup by key yields nothing.

    Examples:
    - Review target transaction_id not found
    - Customer id not found

    HTTP Status: 404 Not Found
    """

    pass


class ForbiddenError(RiskMonitorError):
    """
    Raised when an operation is disabled in the current environment.

    Examples:
    - Clearing all collections while the admin reset flag is off

    HTTP Status: 403 Forbidden
    """

    pass


class ConflictError(RiskMonitorError):
    """
    Raised when a create would duplicate a unique key.

    Examples:
    - Customer email already exists
    - Duplicate transaction_id

    HTTP Status: 409 Conflict
    """

    pass


class PersistenceError(RiskMonitorError):
    """
    Raised when the underlying store fails or is unreachable.

    HTTP Status: 500 Internal Server Error
    """

    pass


class PartialBulkInsertError(PersistenceError):
    """
    Raised when a multi-collection bulk insert only partially succeeded.

    ``details`` maps each collection to the number of inserted records,
    with the failing collections listed under ``failed``.

    HTTP Status: 500 Internal Server Error
    """

    pass


ERROR_STATUS_MAP = {
    ValidationError: 400,
    NotFoundError: 404,
    ForbiddenError: 403,
    ConflictError: 409,
    PersistenceError: 500,
    PartialBulkInsertError: 500,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
