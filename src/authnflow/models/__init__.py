"""authnflow models package.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from .factor_models import (
    CallProfile,
    EmailProfile,
    Factor,
    FactorChallenge,
    FactorProfile,
    GenericProfile,
    HardwareTokenProfile,
    PushProfile,
    QuestionProfile,
    SmsProfile,
    TotpProfile,
    U2fProfile,
    WebAuthnProfile,
)
from .link_models import Link, Operation, parse_links
from .request_models import (
    CallVerifyRequest,
    EmailVerifyRequest,
    GenericVerifyRequest,
    HardwareTokenVerifyRequest,
    PasswordVerifyRequest,
    PushVerifyRequest,
    QuestionVerifyRequest,
    SmsVerifyRequest,
    TotpVerifyRequest,
    U2fVerifyRequest,
    VerifyFactorRequest,
    WebAuthnVerifyRequest,
)
from .transaction_models import (
    AUTHN_PATH,
    TERMINAL_STATUSES,
    AuthenticationStatus,
    AuthenticationTransaction,
    UserInfo,
)

__all__ = [
    # Link models
    "Link",
    "Operation",
    "parse_links",
    # Factor models
    "Factor",
    "FactorChallenge",
    "FactorProfile",
    "CallProfile",
    "EmailProfile",
    "GenericProfile",
    "HardwareTokenProfile",
    "PushProfile",
    "QuestionProfile",
    "SmsProfile",
    "TotpProfile",
    "U2fProfile",
    "WebAuthnProfile",
    # Request models
    "VerifyFactorRequest",
    "CallVerifyRequest",
    "EmailVerifyRequest",
    "GenericVerifyRequest",
    "HardwareTokenVerifyRequest",
    "PasswordVerifyRequest",
    "PushVerifyRequest",
    "QuestionVerifyRequest",
    "SmsVerifyRequest",
    "TotpVerifyRequest",
    "U2fVerifyRequest",
    "WebAuthnVerifyRequest",
    # Transaction models
    "AUTHN_PATH",
    "TERMINAL_STATUSES",
    "AuthenticationStatus",
    "AuthenticationTransaction",
    "UserInfo",
]
