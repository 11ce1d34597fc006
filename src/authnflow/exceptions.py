"""
Exception classes for the authnflow SDK.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models.transaction_models import AuthenticationStatus, AuthenticationTransaction

# Server error codes the state machine treats specially
AUTHENTICATION_FAILED_CODE = "E0000004"
INVALID_PASSCODE_CODE = "E0000068"
USER_LOCKED_CODE = "E0000069"

AUTHENTICATION_FAILURE_CODES = frozenset(
    {AUTHENTICATION_FAILED_CODE, INVALID_PASSCODE_CODE}
)


class AuthnError(Exception):
    """Base exception for authnflow SDK errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status_code = status_code


class ValidationError(AuthnError):
    """Raised when a request is incomplete or does not fit the target factor."""

    def __init__(
        self, message: str, field: str | None = None, details: Any | None = None
    ) -> None:
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class MalformedResponseError(AuthnError):
    """Raised when a server response cannot be parsed into a transaction."""

    def __init__(
        self,
        message: str = "Malformed response",
        field: str | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, "MALFORMED_RESPONSE", details)
        self.field = field


class IllegalTransitionError(AuthnError):
    """Raised when an action is not offered by the current transaction links."""

    def __init__(
        self,
        relation: str,
        status: AuthenticationStatus | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            state = status.value if status is not None else "closed"
            message = f"Action '{relation}' is not available in state {state}"
        super().__init__(message, "ILLEGAL_TRANSITION")
        self.relation = relation
        self.status = status


class TransportError(AuthnError):
    """Raised when the request never produced a server response."""

    def __init__(
        self, message: str = "Transport error", details: Any | None = None
    ) -> None:
        super().__init__(message, "TRANSPORT_ERROR", details)


class TransportTimeoutError(TransportError):
    """Raised when a request times out."""

    def __init__(
        self, message: str = "Request timeout", details: Any | None = None
    ) -> None:
        super().__init__(message, details)
        self.code = "TIMEOUT_ERROR"


class ApiError(AuthnError):
    """Raised when the server answers with a structured error."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        status_code: int | None = None,
        causes: list[str] | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code, details, status_code)
        self.causes = causes or []


class AuthenticationFailedError(ApiError):
    """Raised when the server rejects a credential or factor code.

    The transaction is left where it was, so the same step can be retried.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = AUTHENTICATION_FAILED_CODE,
        status_code: int | None = 401,
        causes: list[str] | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code, status_code, causes, details)
        self.transaction: AuthenticationTransaction | None = None


class RateLimitError(ApiError):
    """Raised when rate limit is exceeded."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        code: str = "E0000047",
        retry_after: int | None = None,
        causes: list[str] | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code, 429, causes, details)
        self.retry_after = retry_after


class ServerError(ApiError):
    """Raised when a server error occurs."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "SERVER_ERROR",
        status_code: int = 500,
        causes: list[str] | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, code, status_code, causes, details)


def create_error_from_response(
    status_code: int,
    error_response: dict[str, Any] | None = None,
    retry_after: int | None = None,
) -> ApiError:
    """Create an appropriate error instance from a structured error body."""
    body = error_response or {}
    message = body.get("errorSummary") or "An error occurred"
    code = body.get("errorCode") or "UNKNOWN_ERROR"
    causes = [
        str(cause.get("errorSummary"))
        for cause in body.get("errorCauses") or []
        if isinstance(cause, dict) and cause.get("errorSummary")
    ]

    message_str = str(message)
    code_str = str(code)

    if code_str in AUTHENTICATION_FAILURE_CODES or status_code == 401:
        return AuthenticationFailedError(message_str, code_str, status_code, causes, body)
    elif status_code == 429:
        return RateLimitError(message_str, code_str, retry_after, causes, body)
    elif status_code >= 500:
        return ServerError(message_str, code_str, status_code, causes, body)
    else:
        return ApiError(message_str, code_str, status_code, causes, body)


def is_lockout(error_response: dict[str, Any] | None) -> bool:
    """Check if a structured error body reports a locked-out user."""
    return (error_response or {}).get("errorCode") == USER_LOCKED_CODE
