"""Verify factor request models for authnflow.

One flat model per factor kind. Every field maps to a fixed wire name
through its alias; ``build()`` produces the wire payload and is where
missing fields are reported.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import Any, ClassVar, Self, Union

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidatorFunctionWrapHandler,
    model_validator,
)

from ..exceptions import ValidationError
from . import factor_models as ft


class _VerifyRequest(BaseModel):
    """Builder mechanics shared by every verify request variant."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    factor_type: ClassVar[str | None] = None
    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="wrap")
    @classmethod
    def _report_invalid_input(
        cls, data: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        try:
            return handler(data)
        except pydantic.ValidationError as e:
            errors = e.errors(include_url=False)
            field = ".".join(str(part) for part in errors[0]["loc"]) or None
            msg = f"Invalid {cls.__name__} field '{field}': {errors[0]['msg']}"
            raise ValidationError(msg, field=field, details=errors) from e

    @classmethod
    def _wire_name(cls, name: str) -> str:
        return cls.model_fields[name].alias or name

    def build(self) -> dict[str, Any]:
        """Serialize to the wire payload.

        Raises:
            ValidationError: If a required field has not been set or a
                field holds something other than a string.

        """
        for name in self.required_fields:
            if getattr(self, name) is None:
                wire_name = self._wire_name(name)
                msg = f"{type(self).__name__} is missing required field '{wire_name}'"
                raise ValidationError(msg, field=wire_name)
        for name, value in self:
            if value is not None and not isinstance(value, str):
                wire_name = self._wire_name(name)
                msg = f"{type(self).__name__} field '{wire_name}' must be a string"
                raise ValidationError(msg, field=wire_name)
        return self.model_dump(by_alias=True, exclude_none=True)


class PasswordVerifyRequest(_VerifyRequest):
    """Verify a password factor."""

    factor_type: ClassVar[str | None] = ft.PASSWORD
    required_fields: ClassVar[tuple[str, ...]] = ("password",)

    password: str | None = Field(default=None, repr=False)

    def set_password(self, password: str | None) -> Self:
        self.password = password
        return self


class QuestionVerifyRequest(_VerifyRequest):
    """Answer a security question factor."""

    factor_type: ClassVar[str | None] = ft.QUESTION
    required_fields: ClassVar[tuple[str, ...]] = ("answer",)

    answer: str | None = Field(default=None, repr=False)

    def set_answer(self, answer: str | None) -> Self:
        self.answer = answer
        return self


class SmsVerifyRequest(_VerifyRequest):
    """Verify an SMS one-time code."""

    factor_type: ClassVar[str | None] = ft.SMS
    required_fields: ClassVar[tuple[str, ...]] = ("pass_code",)

    pass_code: str | None = Field(default=None, alias="passCode", repr=False)

    def set_pass_code(self, pass_code: str | None) -> Self:
        self.pass_code = pass_code
        return self


class CallVerifyRequest(_VerifyRequest):
    """Verify a voice call one-time code."""

    factor_type: ClassVar[str | None] = ft.CALL
    required_fields: ClassVar[tuple[str, ...]] = ("pass_code",)

    pass_code: str | None = Field(default=None, alias="passCode", repr=False)

    def set_pass_code(self, pass_code: str | None) -> Self:
        self.pass_code = pass_code
        return self


class EmailVerifyRequest(_VerifyRequest):
    """Verify an email one-time code."""

    factor_type: ClassVar[str | None] = ft.EMAIL
    required_fields: ClassVar[tuple[str, ...]] = ("pass_code",)

    pass_code: str | None = Field(default=None, alias="passCode", repr=False)

    def set_pass_code(self, pass_code: str | None) -> Self:
        self.pass_code = pass_code
        return self


class TotpVerifyRequest(_VerifyRequest):
    """Verify a software TOTP code."""

    factor_type: ClassVar[str | None] = ft.TOTP
    required_fields: ClassVar[tuple[str, ...]] = ("pass_code",)

    pass_code: str | None = Field(default=None, alias="passCode", repr=False)

    def set_pass_code(self, pass_code: str | None) -> Self:
        self.pass_code = pass_code
        return self


class HardwareTokenVerifyRequest(_VerifyRequest):
    """Verify a hardware token code.

    ``next_pass_code`` is only sent when the server asks for the next
    token code (RSA "next tokencode" mode).
    """

    factor_type: ClassVar[str | None] = ft.HARDWARE_TOKEN
    required_fields: ClassVar[tuple[str, ...]] = ("pass_code",)

    pass_code: str | None = Field(default=None, alias="passCode", repr=False)
    next_pass_code: str | None = Field(default=None, alias="nextPassCode", repr=False)

    def set_pass_code(self, pass_code: str | None) -> Self:
        self.pass_code = pass_code
        return self

    def set_next_pass_code(self, next_pass_code: str | None) -> Self:
        self.next_pass_code = next_pass_code
        return self


class PushVerifyRequest(_VerifyRequest):
    """Start or poll a push verification; carries no fields."""

    factor_type: ClassVar[str | None] = ft.PUSH


class U2fVerifyRequest(_VerifyRequest):
    """Verify a U2F security key assertion."""

    factor_type: ClassVar[str | None] = ft.U2F
    required_fields: ClassVar[tuple[str, ...]] = ("client_data", "signature_data")

    client_data: str | None = Field(default=None, alias="clientData")
    signature_data: str | None = Field(default=None, alias="signatureData")

    def set_client_data(self, client_data: str | None) -> Self:
        self.client_data = client_data
        return self

    def set_signature_data(self, signature_data: str | None) -> Self:
        self.signature_data = signature_data
        return self


class WebAuthnVerifyRequest(_VerifyRequest):
    """Verify a WebAuthn assertion."""

    factor_type: ClassVar[str | None] = ft.WEBAUTHN
    required_fields: ClassVar[tuple[str, ...]] = (
        "client_data",
        "signature_data",
        "authenticator_data",
    )

    client_data: str | None = Field(default=None, alias="clientData")
    signature_data: str | None = Field(default=None, alias="signatureData")
    authenticator_data: str | None = Field(default=None, alias="authenticatorData")

    def set_client_data(self, client_data: str | None) -> Self:
        self.client_data = client_data
        return self

    def set_signature_data(self, signature_data: str | None) -> Self:
        self.signature_data = signature_data
        return self

    def set_authenticator_data(self, authenticator_data: str | None) -> Self:
        self.authenticator_data = authenticator_data
        return self


class GenericVerifyRequest(_VerifyRequest):
    """Free-form payload for factor kinds the SDK does not know."""

    properties: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_wire_fields(cls, data: Any) -> Any:
        """Accept a wire payload (as returned by ``build()``) as well as ``properties=``."""
        if not isinstance(data, dict) or set(data) == {"properties"}:
            return data
        properties = data.get("properties")
        wire = {key: value for key, value in data.items() if key != "properties"}
        if isinstance(properties, dict):
            wire = {**properties, **wire}
        return {"properties": wire}

    def set(self, name: str, value: Any) -> Self:
        """Set one wire field; ``None`` removes it."""
        if value is None:
            self.properties.pop(name, None)
        else:
            self.properties[name] = value
        return self

    def build(self) -> dict[str, Any]:
        return dict(self.properties)


VerifyFactorRequest = Union[
    PasswordVerifyRequest,
    QuestionVerifyRequest,
    SmsVerifyRequest,
    CallVerifyRequest,
    EmailVerifyRequest,
    TotpVerifyRequest,
    HardwareTokenVerifyRequest,
    PushVerifyRequest,
    U2fVerifyRequest,
    WebAuthnVerifyRequest,
    GenericVerifyRequest,
]
