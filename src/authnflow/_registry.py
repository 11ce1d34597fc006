"""Factor registry for authnflow.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import NamedTuple

from .exceptions import ValidationError
from .models import factor_models as ft
from .models.factor_models import (
    CallProfile,
    EmailProfile,
    Factor,
    GenericProfile,
    HardwareTokenProfile,
    PushProfile,
    QuestionProfile,
    SmsProfile,
    TotpProfile,
    U2fProfile,
    WebAuthnProfile,
)
from .models.request_models import (
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


class FactorVariant(NamedTuple):
    """Request and profile types registered for one factor kind."""

    request_type: type[VerifyFactorRequest]
    profile_type: type[ft.FactorProfile]


FALLBACK_VARIANT = FactorVariant(GenericVerifyRequest, GenericProfile)

_DEFAULT_VARIANTS: dict[str, FactorVariant] = {
    ft.PASSWORD: FactorVariant(PasswordVerifyRequest, GenericProfile),
    ft.QUESTION: FactorVariant(QuestionVerifyRequest, QuestionProfile),
    ft.SMS: FactorVariant(SmsVerifyRequest, SmsProfile),
    ft.CALL: FactorVariant(CallVerifyRequest, CallProfile),
    ft.EMAIL: FactorVariant(EmailVerifyRequest, EmailProfile),
    ft.TOTP: FactorVariant(TotpVerifyRequest, TotpProfile),
    ft.HARDWARE_TOKEN: FactorVariant(HardwareTokenVerifyRequest, HardwareTokenProfile),
    ft.RSA_TOKEN: FactorVariant(HardwareTokenVerifyRequest, HardwareTokenProfile),
    ft.HOTP: FactorVariant(HardwareTokenVerifyRequest, HardwareTokenProfile),
    ft.PUSH: FactorVariant(PushVerifyRequest, PushProfile),
    ft.U2F: FactorVariant(U2fVerifyRequest, U2fProfile),
    ft.WEBAUTHN: FactorVariant(WebAuthnVerifyRequest, WebAuthnProfile),
}


class FactorRegistry:
    """Maps ``factorType`` discriminators to their request/profile variants."""

    def __init__(self, variants: dict[str, FactorVariant] | None = None) -> None:
        """Initialize the registry.

        Args:
            variants: Initial entries; defaults to the built-in factor kinds

        """
        self._variants = dict(_DEFAULT_VARIANTS if variants is None else variants)

    def register(
        self,
        factor_type: str,
        request_type: type[VerifyFactorRequest],
        profile_type: type[ft.FactorProfile] = GenericProfile,
    ) -> None:
        """Add or replace the variant for a factor type."""
        self._variants[factor_type] = FactorVariant(request_type, profile_type)

    def is_known(self, factor_type: str) -> bool:
        return factor_type in self._variants

    def lookup(self, factor_type: str) -> FactorVariant:
        """Return the variant for a factor type, or the fallback variant."""
        return self._variants.get(factor_type, FALLBACK_VARIANT)

    def check_request(self, factor: Factor, request: VerifyFactorRequest) -> None:
        """Ensure ``request`` is the variant registered for ``factor``.

        Raises:
            ValidationError: If the request does not fit the factor type.

        """
        expected = self.lookup(factor.factor_type).request_type
        if type(request) is not expected:
            msg = (
                f"{type(request).__name__} cannot verify a '{factor.factor_type}' "
                f"factor; expected {expected.__name__}"
            )
            raise ValidationError(msg, field="factorType")

    def __contains__(self, factor_type: object) -> bool:
        return factor_type in self._variants

    def __len__(self) -> int:
        return len(self._variants)
