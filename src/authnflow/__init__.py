"""
authnflow Python SDK

Async client library for server-driven primary and multi-factor
authentication. Tracks the authentication transaction as a state machine
and provides typed verify requests for each factor kind.
"""

from ._registry import FALLBACK_VARIANT, FactorRegistry, FactorVariant
from ._transaction import TransactionHandle
from ._transport import HttpTransport, RawResponse, Transport
from .client import AuthenticationClient
from .config import ClientConfig
from .exceptions import *
from .handlers import AuthenticationStateHandler, dispatch
from .models import *

__version__ = "1.0.0"

__all__ = [
    "AuthenticationClient",
    "TransactionHandle",
    "ClientConfig",
    "FactorRegistry",
    "FactorVariant",
    "FALLBACK_VARIANT",
    # Transport
    "Transport",
    "HttpTransport",
    "RawResponse",
    # Handlers
    "AuthenticationStateHandler",
    "dispatch",
    # Exceptions
    "AuthnError",
    "ValidationError",
    "MalformedResponseError",
    "IllegalTransitionError",
    "TransportError",
    "TransportTimeoutError",
    "ApiError",
    "AuthenticationFailedError",
    "RateLimitError",
    "ServerError",
    # Models
    "AuthenticationStatus",
    "AuthenticationTransaction",
    "UserInfo",
    "Factor",
    "FactorChallenge",
    "Link",
    "Operation",
    "GenericProfile",
    "SmsProfile",
    "CallProfile",
    "EmailProfile",
    "TotpProfile",
    "HardwareTokenProfile",
    "PushProfile",
    "QuestionProfile",
    "U2fProfile",
    "WebAuthnProfile",
    "VerifyFactorRequest",
    "PasswordVerifyRequest",
    "QuestionVerifyRequest",
    "SmsVerifyRequest",
    "CallVerifyRequest",
    "EmailVerifyRequest",
    "TotpVerifyRequest",
    "HardwareTokenVerifyRequest",
    "PushVerifyRequest",
    "U2fVerifyRequest",
    "WebAuthnVerifyRequest",
    "GenericVerifyRequest",
]
