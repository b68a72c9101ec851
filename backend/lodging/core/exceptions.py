"""
Domain error taxonomy.

The booking workflow raises these; the API layer maps each kind to its
HTTP status (see lodging.api.errors). Anything that is not a DomainError
is an unexpected fault and surfaces as a 500.
"""

from fastapi import status


class DomainError(Exception):
    """Base domain error carrying a human-readable message and a status code."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"

    def __init__(self, message: str = "No result for this search!"):
        super().__init__(message)


class PaymentRequiredError(DomainError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    kind = "payment_required"

    def __init__(self, message: str = "You haven't paid yet"):
        super().__init__(message)


class UnauthorizedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthorized"

    def __init__(self, message: str = "You must be signed in to continue"):
        super().__init__(message)


class ForbiddenError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"

    def __init__(self, message: str = "You don't have permission"):
        super().__init__(message)
