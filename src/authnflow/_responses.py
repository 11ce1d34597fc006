"""Response parsing for authnflow.

Turns decoded server bodies into transaction snapshots, and non-2xx bodies
into errors.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

import time
from typing import Any

import pydantic

from ._registry import FactorRegistry
from .exceptions import ApiError, MalformedResponseError, create_error_from_response
from .models.factor_models import Factor, FactorChallenge
from .models.link_models import parse_links
from .models.transaction_models import (
    TERMINAL_STATUSES,
    AuthenticationStatus,
    AuthenticationTransaction,
    UserInfo,
)

# HTTP Error Status Constants
HTTP_SUCCESS_THRESHOLD = 300


def parse_transaction(
    body: dict[str, Any], registry: FactorRegistry
) -> AuthenticationTransaction:
    """Parse a transaction response body.

    Args:
        body: Decoded JSON object
        registry: Registry used to type embedded factors

    Returns:
        The transaction snapshot.

    Raises:
        MalformedResponseError: If required fields are missing or invalid.

    """
    raw_status = body.get("status")
    if not raw_status:
        raise MalformedResponseError("Response has no 'status'", field="status", details=body)
    try:
        status = AuthenticationStatus(raw_status)
    except ValueError as e:
        msg = f"Unknown transaction status '{raw_status}'"
        raise MalformedResponseError(msg, field="status", details=body) from e

    state_token = body.get("stateToken")
    session_token = body.get("sessionToken")
    if status is AuthenticationStatus.SUCCESS and not session_token:
        raise MalformedResponseError(
            "SUCCESS response has no 'sessionToken'", field="sessionToken"
        )
    if status not in TERMINAL_STATUSES and not state_token:
        msg = f"{status.value} response has no 'stateToken'"
        raise MalformedResponseError(msg, field="stateToken")

    embedded = body.get("_embedded") or {}
    if not isinstance(embedded, dict):
        raise MalformedResponseError("'_embedded' is not an object", field="_embedded")

    single = embedded.get("factor")
    raw_challenge = embedded.get("challenge")
    if raw_challenge is None and isinstance(single, dict):
        raw_challenge = (single.get("_embedded") or {}).get("challenge")

    try:
        return AuthenticationTransaction(
            status=status,
            state_token=state_token,
            session_token=session_token,
            expires_at=body.get("expiresAt"),
            factor_result=body.get("factorResult"),
            relay_state=body.get("relayState"),
            user=_parse_user(embedded.get("user")),
            factors=tuple(
                parse_factor(raw, registry) for raw in embedded.get("factors") or []
            ),
            factor=parse_factor(single, registry) if single else None,
            challenge=_parse_challenge(raw_challenge),
            links=parse_links(body.get("_links")),
        )
    except pydantic.ValidationError as e:
        raise MalformedResponseError("Invalid transaction response", details=body) from e


def parse_factor(raw: Any, registry: FactorRegistry) -> Factor:
    """Parse one embedded factor; unknown types get a generic profile."""
    if not isinstance(raw, dict) or not raw.get("factorType"):
        raise MalformedResponseError("Embedded factor has no 'factorType'", field="factorType")

    factor_type = raw["factorType"]
    variant = registry.lookup(factor_type)
    profile = variant.profile_type.model_validate(raw.get("profile") or {})
    return Factor(
        id=raw.get("id"),
        factor_type=factor_type,
        provider=raw.get("provider"),
        status=raw.get("status"),
        vendor_name=raw.get("vendorName"),
        profile=profile,
        links=parse_links(raw.get("_links")),
        is_known=registry.is_known(factor_type),
    )


def parse_error(
    status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None
) -> ApiError:
    """Build the error for a non-2xx structured response."""
    retry_after = None
    # x-rate-limit-reset is an epoch timestamp, not a delay
    reset = (headers or {}).get("x-rate-limit-reset")
    if reset and reset.isdigit():
        retry_after = max(0, int(reset) - int(time.time()))
    return create_error_from_response(status_code, body, retry_after)


def _parse_user(raw: Any) -> UserInfo | None:
    if not isinstance(raw, dict):
        return None
    profile = raw.get("profile") or {}
    if not isinstance(profile, dict):
        raise MalformedResponseError("User 'profile' is not an object", field="profile")
    return UserInfo(
        id=raw.get("id"),
        login=profile.get("login"),
        first_name=profile.get("firstName"),
        last_name=profile.get("lastName"),
        locale=profile.get("locale"),
        time_zone=profile.get("timeZone"),
    )


def _parse_challenge(raw: Any) -> FactorChallenge | None:
    if not isinstance(raw, dict) or not raw.get("challenge"):
        return None
    return FactorChallenge.model_validate(raw)
