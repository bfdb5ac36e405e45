"""Exception classes for the Paywire SDK."""

import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    """Error taxonomy shared by the SDK and the service."""

    QUERY_TOO_SHORT = "QUERY_TOO_SHORT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
    UNRESOLVABLE_TARGET = "UNRESOLVABLE_TARGET"
    DECODE_UNCLASSIFIED = "DECODE_UNCLASSIFIED"
    LEDGER_DECLINED = "LEDGER_DECLINED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    IDEMPOTENCY_CONFLICT = "IDEMPOTENCY_CONFLICT"
    TARGET_NOT_CONFIGURED = "TARGET_NOT_CONFIGURED"


class PayError(Exception):
    """Base exception for all Paywire errors."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.error_code or 'ERROR'}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a gateway error body."""
        return {
            "error_code": self.error_code or "ERROR",
            "message": self.message,
            "details": self.details,
        }


class QueryTooShort(PayError):
    """Raised when a recipient search query is below the minimum length."""

    def __init__(
        self,
        message: str = "Enter at least 3 characters to search",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=ErrorKind.QUERY_TOO_SHORT.value,
            details=details,
        )


class InvalidAmount(PayError):
    """Raised when a transfer amount is not a positive two-decimal number."""

    def __init__(
        self,
        message: str = "Enter a valid amount",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=ErrorKind.INVALID_AMOUNT.value,
            details=details,
        )


class RecipientNotFound(PayError):
    """Raised when no account matches the requested identifier."""

    def __init__(
        self,
        message: str = "Recipient not found",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=404,
            error_code=ErrorKind.RECIPIENT_NOT_FOUND.value,
            details=details,
        )


class UnresolvableTarget(PayError):
    """Raised for targets that can be displayed but not looked up.

    ``details["address"]`` carries the raw address for manual display.
    """

    def __init__(
        self,
        message: str = "This code cannot be matched to an account",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=422,
            error_code=ErrorKind.UNRESOLVABLE_TARGET.value,
            details=details,
        )

    @property
    def address(self) -> Optional[str]:
        return self.details.get("address")


class LedgerDeclined(PayError):
    """Raised by a ledger adapter for a business-level decline."""

    def __init__(
        self,
        message: str = "Transfer failed",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=ErrorKind.LEDGER_DECLINED.value,
            details=details,
        )


class TransportFailure(PayError):
    """Raised when a remote call produced no structured answer.

    The outcome of a write is unknown after this error.
    """

    def __init__(
        self,
        message: str = "Could not reach the payment service",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=503,
            error_code=ErrorKind.TRANSPORT_FAILURE.value,
            details=details,
        )


class ConflictIdempotency(PayError):
    """Raised when an in-flight idempotency key is reused for another request."""

    def __init__(
        self,
        message: str = "Idempotency key conflict",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code=ErrorKind.IDEMPOTENCY_CONFLICT.value,
            details=details,
        )


class TargetNotConfigured(PayError):
    """Raised when a receive code is requested for an identifier that is unset."""

    def __init__(
        self,
        message: str = "Please set up your details in Profile first",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=422,
            error_code=ErrorKind.TARGET_NOT_CONFIGURED.value,
            details=details,
        )


# Mapping from error codes to exception classes
ERROR_CODE_MAP: dict[str, type[PayError]] = {
    ErrorKind.QUERY_TOO_SHORT.value: QueryTooShort,
    ErrorKind.INVALID_AMOUNT.value: InvalidAmount,
    ErrorKind.RECIPIENT_NOT_FOUND.value: RecipientNotFound,
    ErrorKind.UNRESOLVABLE_TARGET.value: UnresolvableTarget,
    ErrorKind.LEDGER_DECLINED.value: LedgerDeclined,
    ErrorKind.TRANSPORT_FAILURE.value: TransportFailure,
    ErrorKind.IDEMPOTENCY_CONFLICT.value: ConflictIdempotency,
    ErrorKind.TARGET_NOT_CONFIGURED.value: TargetNotConfigured,
}


def raise_for_error_response(
    status_code: int,
    response_data: dict[str, Any],
) -> None:
    """Raise the appropriate exception based on a gateway error response.

    Accepts both the service's ``error_code`` bodies and PostgREST's
    ``code``/``message``/``details``/``hint`` bodies.
    """
    error_code = response_data.get("error_code") or response_data.get("code") or ""
    message = response_data.get("message", "Unknown error")
    details = response_data.get("details", {})
    if not isinstance(details, dict):
        details = {"detail": details}

    exception_class = ERROR_CODE_MAP.get(error_code, PayError)

    if exception_class is PayError:
        raise PayError(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )
    raise exception_class(message=message, details=details)
