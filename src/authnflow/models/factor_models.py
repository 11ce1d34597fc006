"""Factor models for authnflow.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .link_models import Link

# Wire discriminators for the factor kinds the SDK knows about
PASSWORD = "password"
QUESTION = "question"
SMS = "sms"
CALL = "call"
EMAIL = "email"
TOTP = "token:software:totp"
HARDWARE_TOKEN = "token:hardware"
RSA_TOKEN = "token"
HOTP = "token:hotp"
PUSH = "push"
U2F = "u2f"
WEBAUTHN = "webauthn"


class _Profile(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class SmsProfile(_Profile):
    """SMS factor profile."""

    phone_number: str | None = Field(default=None, alias="phoneNumber")


class CallProfile(_Profile):
    """Voice call factor profile."""

    phone_number: str | None = Field(default=None, alias="phoneNumber")
    phone_extension: str | None = Field(default=None, alias="phoneExtension")


class EmailProfile(_Profile):
    """Email factor profile."""

    email: str | None = None


class TotpProfile(_Profile):
    """Software TOTP factor profile."""

    credential_id: str | None = Field(default=None, alias="credentialId")


class HardwareTokenProfile(_Profile):
    """Hardware / RSA / HOTP token profile."""

    credential_id: str | None = Field(default=None, alias="credentialId")


class PushProfile(_Profile):
    """Push factor profile."""

    name: str | None = None
    platform: str | None = None
    device_type: str | None = Field(default=None, alias="deviceType")
    credential_id: str | None = Field(default=None, alias="credentialId")


class QuestionProfile(_Profile):
    """Security question profile."""

    question: str | None = None
    question_text: str | None = Field(default=None, alias="questionText")


class U2fProfile(_Profile):
    """U2F security key profile."""

    credential_id: str | None = Field(default=None, alias="credentialId")
    app_id: str | None = Field(default=None, alias="appId")
    version: str | None = None


class WebAuthnProfile(_Profile):
    """WebAuthn authenticator profile."""

    credential_id: str | None = Field(default=None, alias="credentialId")
    authenticator_name: str | None = Field(default=None, alias="authenticatorName")
    app_id: str | None = Field(default=None, alias="appId")


class GenericProfile(_Profile):
    """Profile for factor kinds the SDK does not know; keeps every field."""

    model_config = ConfigDict(frozen=True, extra="allow")


FactorProfile = Union[
    SmsProfile,
    CallProfile,
    EmailProfile,
    TotpProfile,
    HardwareTokenProfile,
    PushProfile,
    QuestionProfile,
    U2fProfile,
    WebAuthnProfile,
    GenericProfile,
]


class Factor(BaseModel):
    """A factor descriptor embedded in a transaction."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    factor_type: str
    provider: str | None = None
    status: str | None = None
    vendor_name: str | None = None
    profile: FactorProfile = Field(default_factory=GenericProfile)
    links: tuple[Link, ...] = ()
    is_known: bool = True

    def link(self, relation: str) -> Link | None:
        """Return the first link with the given relation, if any."""
        return next((link for link in self.links if link.relation == relation), None)


class FactorChallenge(BaseModel):
    """WebAuthn challenge embedded in an ``MFA_CHALLENGE`` response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    challenge: str
    user_verification: str | None = Field(default=None, alias="userVerification")
