"""Domain-level exceptions.

Every failure the checkout core can report is a subclass of
DomainException so the CLI layer can catch them uniformly and display
the human-readable message.  Nothing here is fatal: after any of these
the cart and session are left in their last known-good state.
"""

from __future__ import annotations


DEFAULT_ERROR_MESSAGE = "An error occurred"


class DomainException(Exception):
    """Base class for all storefront errors."""

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class UnauthenticatedError(DomainException):
    """No credential, or the backend rejected the credential."""

    def __init__(self, message: str = "Please login to continue") -> None:
        super().__init__(message)


class EmptyCartError(DomainException):
    def __init__(self, message: str = "Your cart is empty") -> None:
        super().__init__(message)


class OutOfStockError(DomainException):
    def __init__(self, message: str = "This product is out of stock") -> None:
        super().__init__(message)


class SubmissionInProgressError(DomainException):
    """A checkout submission is already outstanding for this cart."""

    def __init__(self, message: str = "An order submission is already in progress") -> None:
        super().__init__(message)


class NetworkError(DomainException):
    """No response was received from the backend."""

    def __init__(
        self, message: str = "Network error. Please check your connection."
    ) -> None:
        super().__init__(message)


class AmbiguousOutcomeError(DomainException):
    """The request may have reached the server; its effect is unknown."""


class ServerRejectedError(DomainException):
    """The backend answered with an error status.

    ``field_errors`` maps field names to messages when the server
    provided field-level validation detail.
    """

    def __init__(
        self,
        message: str,
        http_status: int,
        field_errors: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.field_errors = dict(field_errors or {})


class ProviderError(DomainException):
    """The payment provider reported a failure."""
