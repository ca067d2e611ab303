"""
Payment record error hierarchy.

Each error carries a human readable message that is returned to clients
verbatim as ``{"error": message}``. The HTTP status an error maps to depends
on the operation that raised it, so the route layer decides; ``status_code``
is only the fallback used when an error escapes a route unmapped.
"""
from typing import Dict


class PaymentError(Exception):
    """Base exception for every payment record failure."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, str]:
        """Convert exception to API error response format."""
        return {"error": self.message}


class PaymentValidationError(PaymentError):
    """
    The payment cannot be acted on as supplied.

    Example:
    - Empty or missing payment identifier
    """

    status_code = 400


class PaymentNotFoundError(PaymentError):
    """No stored payment matches the identifier."""

    status_code = 404


class PaymentAlreadyExistsError(PaymentError):
    """A payment with the identifier is already stored."""

    status_code = 400


class PaymentConflictError(PaymentError):
    """
    Stored data breaks the one-record-per-identifier invariant.

    Signals corruption in the store rather than a client mistake, so it is
    reported as a server error and never retried.
    """

    status_code = 500


class StoreError(PaymentError):
    """The backing store failed (connection, query or write rejected)."""

    status_code = 500


class ConfigurationError(Exception):
    """Required startup configuration is missing."""
