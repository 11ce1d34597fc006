"""Test configuration and common utilities.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import respx

from authnflow import FactorRegistry, HttpTransport, Operation, RawResponse

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

ORG_URL = "https://dev-1234.authn.test"


def link(path: str, name: str | None = None) -> dict[str, Any]:
    """Build a ``_links`` entry the way the server sends it."""
    entry: dict[str, Any] = {"href": f"{ORG_URL}{path}", "hints": {"allow": ["POST"]}}
    if name:
        entry["name"] = name
    return entry


class SpyTransport:
    """Transport double that records submissions and replays scripted replies."""

    def __init__(self) -> None:
        self.calls: list[tuple[Operation, dict[str, Any] | None]] = []
        self._replies: list[RawResponse | Exception] = []

    def reply(self, status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> None:
        self._replies.append(RawResponse(status_code, body, headers or {}))

    def fail(self, error: Exception) -> None:
        self._replies.append(error)

    async def submit(
        self, operation: Operation, payload: dict[str, Any] | None
    ) -> RawResponse:
        self.calls.append((operation, payload))
        if not self._replies:
            msg = f"Unexpected submission to {operation.href}"
            raise AssertionError(msg)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def base_url() -> str:
    """Return the org URL used by tests.

    Returns:
        str: The org URL for testing.

    """
    return ORG_URL


@pytest.fixture
def registry() -> FactorRegistry:
    return FactorRegistry()


@pytest.fixture
def spy_transport() -> SpyTransport:
    """Return a fresh spy transport with no scripted replies."""
    return SpyTransport()


@pytest.fixture
async def transport(base_url: str) -> AsyncGenerator[HttpTransport, None]:
    """Create an HTTP transport for respx-mocked tests.

    Yields:
        HttpTransport: Configured transport.

    """
    async with HttpTransport(base_url, timeout=5.0, api_key="test-api-key-12345") as transport:
        yield transport


@pytest.fixture
def mock_responses() -> Generator[Any, None, None]:
    """Mock HTTP responses.

    Yields:
        The mock router for HTTP requests.

    """
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def user_data() -> dict[str, Any]:
    return {
        "id": "00ub0oNGTSWTBKOLGLNR",
        "profile": {
            "login": "isaac.brock@example.com",
            "firstName": "Isaac",
            "lastName": "Brock",
            "locale": "en_US",
            "timeZone": "America/Los_Angeles",
        },
    }


@pytest.fixture
def mfa_required_response(user_data: dict[str, Any]) -> dict[str, Any]:
    """Sample ``MFA_REQUIRED`` response listing several factors.

    Returns:
        dict[str, Any]: Response body.

    """
    return {
        "stateToken": "007ucIX7PATyn94hsHfOLVaXAmOBkKHWnOOLG43bsb",
        "expiresAt": "2025-11-03T10:15:57.000Z",
        "status": "MFA_REQUIRED",
        "_embedded": {
            "user": user_data,
            "factors": [
                {
                    "id": "fwf2rhMqLpxCa1I7A0g4",
                    "factorType": "webauthn",
                    "provider": "FIDO",
                    "vendorName": "FIDO",
                    "profile": {
                        "credentialId": "l3Br0n-7H3g047NqESqJynFtIgf3Ix9OfaRoNwLoloso99Xl2zS_O7EXUkmPeAIzTVtEL4dYjicJWBz7NpqhGA",
                        "authenticatorName": "YubiKey 5",
                    },
                    "_links": {
                        "verify": link("/api/v1/authn/factors/fwf2rhMqLpxCa1I7A0g4/verify"),
                    },
                },
                {
                    "id": "sms193zUBEROPBNZKPPE",
                    "factorType": "sms",
                    "provider": "OKTA",
                    "profile": {"phoneNumber": "+1 XXX-XXX-1337"},
                    "_links": {
                        "verify": link("/api/v1/authn/factors/sms193zUBEROPBNZKPPE/verify"),
                    },
                },
                {
                    "id": "opf3hkfocI4JTLAju0g4",
                    "factorType": "push",
                    "provider": "OKTA",
                    "profile": {
                        "credentialId": "isaac.brock@example.com",
                        "deviceType": "SmartPhone_IPhone",
                        "name": "Isaac's iPhone",
                        "platform": "IOS",
                    },
                    "_links": {
                        "verify": link("/api/v1/authn/factors/opf3hkfocI4JTLAju0g4/verify"),
                    },
                },
            ],
        },
        "_links": {"cancel": link("/api/v1/authn/cancel")},
    }


@pytest.fixture
def webauthn_challenge_response(user_data: dict[str, Any]) -> dict[str, Any]:
    """Sample ``MFA_CHALLENGE`` response for the WebAuthn factor.

    Returns:
        dict[str, Any]: Response body.

    """
    return {
        "stateToken": "007ucIX7PATyn94hsHfOLVaXAmOBkKHWnOOLG43bsb",
        "expiresAt": "2025-11-03T10:15:57.000Z",
        "status": "MFA_CHALLENGE",
        "factorResult": "CHALLENGE",
        "_embedded": {
            "user": user_data,
            "factor": {
                "id": "fwf2rhMqLpxCa1I7A0g4",
                "factorType": "webauthn",
                "provider": "FIDO",
                "vendorName": "FIDO",
                "profile": {"credentialId": "l3Br0n-7H3g047NqESqJynFtIgf3Ix9OfaRoNwLoloso99Xl2zS_O7EXUkmPeAIzTVtEL4dYjicJWBz7NpqhGA"},
            },
            "challenge": {
                "challenge": "vRwUEWwIbXFPGaJBr8dh",
                "userVerification": "preferred",
            },
        },
        "_links": {
            "next": link("/api/v1/authn/factors/fwf2rhMqLpxCa1I7A0g4/verify", "verify"),
            "prev": link("/api/v1/authn/previous"),
            "cancel": link("/api/v1/authn/cancel"),
        },
    }


@pytest.fixture
def sms_challenge_response() -> dict[str, Any]:
    """Sample ``MFA_CHALLENGE`` response for the SMS factor."""
    return {
        "stateToken": "007ucIX7PATyn94hsHfOLVaXAmOBkKHWnOOLG43bsb",
        "expiresAt": "2025-11-03T10:15:57.000Z",
        "status": "MFA_CHALLENGE",
        "_embedded": {
            "factor": {
                "id": "sms193zUBEROPBNZKPPE",
                "factorType": "sms",
                "provider": "OKTA",
                "profile": {"phoneNumber": "+1 XXX-XXX-1337"},
            },
        },
        "_links": {
            "next": link("/api/v1/authn/factors/sms193zUBEROPBNZKPPE/verify", "verify"),
            "prev": link("/api/v1/authn/previous"),
            "cancel": link("/api/v1/authn/cancel"),
            "resend": [link("/api/v1/authn/factors/sms193zUBEROPBNZKPPE/verify/resend", "sms")],
        },
    }


@pytest.fixture
def success_response(user_data: dict[str, Any]) -> dict[str, Any]:
    """Sample ``SUCCESS`` response.

    Returns:
        dict[str, Any]: Response body.

    """
    return {
        "expiresAt": "2025-11-03T10:15:57.000Z",
        "status": "SUCCESS",
        "sessionToken": "00Fpzf4en68pCXTsMjcX8JPMctzN2Wiw4LDOBL_9pe",
        "_embedded": {"user": user_data},
    }


@pytest.fixture
def invalid_passcode_error() -> dict[str, Any]:
    """Sample structured error for a rejected factor code.

    Returns:
        dict[str, Any]: Error body.

    """
    return {
        "errorCode": "E0000068",
        "errorSummary": "Invalid Passcode/Answer",
        "errorLink": "E0000068",
        "errorId": "oaei_IfXcpnTHit_YEKGInpFw",
        "errorCauses": [
            {"errorSummary": "Your passcode doesn't match our records. Please try again."}
        ],
    }


@pytest.fixture
def lockout_error() -> dict[str, Any]:
    """Sample structured error for a locked-out user."""
    return {
        "errorCode": "E0000069",
        "errorSummary": "User Locked",
        "errorLink": "E0000069",
        "errorId": "oaeGLSGT-QCT_ijvM0RT6SV0A",
        "errorCauses": [],
    }
