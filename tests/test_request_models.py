"""Tests for verify factor request builders."""

import pytest

from authnflow import (
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
    ValidationError,
    VerifyFactorRequest,
    WebAuthnVerifyRequest,
)


def test_setters_chain_and_return_same_instance() -> None:
    request = WebAuthnVerifyRequest()

    returned = (
        request.set_signature_data("sig1")
        .set_client_data("cd1")
        .set_authenticator_data("ad1")
    )

    assert returned is request
    assert request.build() == {
        "signatureData": "sig1",
        "clientData": "cd1",
        "authenticatorData": "ad1",
    }


def test_last_write_wins() -> None:
    request = SmsVerifyRequest().set_pass_code("111111").set_pass_code("222222")

    assert request.build() == {"passCode": "222222"}


def test_keyword_and_wire_name_construction_are_equivalent() -> None:
    by_field = TotpVerifyRequest(pass_code="123456")
    by_wire_name = TotpVerifyRequest(passCode="123456")

    assert by_field.build() == by_wire_name.build() == {"passCode": "123456"}


def test_setting_a_field_never_validates() -> None:
    """Missing fields are only reported by build()."""
    request = WebAuthnVerifyRequest().set_client_data("cd1").set_client_data(None)

    with pytest.raises(ValidationError) as exc_info:
        request.build()

    assert exc_info.value.field == "clientData"


def test_missing_field_names_the_wire_field() -> None:
    request = WebAuthnVerifyRequest(client_data="cd1", signature_data="sig1")

    with pytest.raises(ValidationError) as exc_info:
        request.build()

    assert exc_info.value.field == "authenticatorData"
    assert "authenticatorData" in exc_info.value.message


def test_webauthn_and_u2f_are_disjoint_variants() -> None:
    assert not issubclass(WebAuthnVerifyRequest, U2fVerifyRequest)
    assert "authenticator_data" not in U2fVerifyRequest.model_fields

    u2f = U2fVerifyRequest().set_client_data("cd1").set_signature_data("sig1")
    assert u2f.build() == {"clientData": "cd1", "signatureData": "sig1"}


def test_build_is_pure() -> None:
    request = QuestionVerifyRequest(answer="mayonnaise")

    assert request.build() == request.build() == {"answer": "mayonnaise"}


def test_optional_fields_are_omitted() -> None:
    request = HardwareTokenVerifyRequest(pass_code="987654")
    assert request.build() == {"passCode": "987654"}

    request.set_next_pass_code("123987")
    assert request.build() == {"passCode": "987654", "nextPassCode": "123987"}


def test_push_request_has_no_fields() -> None:
    assert PushVerifyRequest().build() == {}


def test_secrets_are_hidden_from_repr() -> None:
    assert "hunter2" not in repr(PasswordVerifyRequest(password="hunter2"))
    assert "654321" not in repr(SmsVerifyRequest(pass_code="654321"))


def test_unknown_fields_are_reported_as_sdk_errors() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SmsVerifyRequest(passcode="123456")

    assert exc_info.value.field == "passcode"


def test_wrong_value_type_is_reported_as_sdk_error() -> None:
    with pytest.raises(ValidationError) as exc_info:
        SmsVerifyRequest(pass_code=123456)

    assert exc_info.value.field == "passCode"


def test_wrong_value_type_from_setter_is_reported_by_build() -> None:
    request = SmsVerifyRequest().set_pass_code(123456)  # type: ignore[arg-type]

    with pytest.raises(ValidationError) as exc_info:
        request.build()

    assert exc_info.value.field == "passCode"


def test_generic_request_passes_fields_through() -> None:
    request = GenericVerifyRequest().set("nonce", "abc").set("deviceId", "d1")
    request.set("deviceId", None)

    assert request.build() == {"nonce": "abc"}


def test_generic_request_accepts_wire_payload() -> None:
    request = GenericVerifyRequest.model_validate({"nonce": "abc", "deviceId": "d1"})

    assert request.properties == {"nonce": "abc", "deviceId": "d1"}


@pytest.mark.parametrize(
    "request_",
    [
        PasswordVerifyRequest(password="hunter2"),
        QuestionVerifyRequest(answer="mayonnaise"),
        SmsVerifyRequest(pass_code="123456"),
        CallVerifyRequest(pass_code="123456"),
        EmailVerifyRequest(pass_code="123456"),
        TotpVerifyRequest(pass_code="123456"),
        HardwareTokenVerifyRequest(pass_code="987654", next_pass_code="123987"),
        PushVerifyRequest(),
        U2fVerifyRequest(client_data="cd1", signature_data="sig1"),
        WebAuthnVerifyRequest(client_data="cd1", signature_data="sig1", authenticator_data="ad1"),
        GenericVerifyRequest().set("nonce", "abc"),
    ],
    ids=lambda request_: type(request_).__name__,
)
def test_wire_payload_parses_back_unchanged(request_: VerifyFactorRequest) -> None:
    payload = request_.build()

    assert type(request_).model_validate(payload).build() == payload
