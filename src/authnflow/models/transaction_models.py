"""Authentication transaction models for authnflow.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .factor_models import Factor, FactorChallenge
from .link_models import Link, Operation

AUTHN_PATH = "/api/v1/authn"


class AuthenticationStatus(str, Enum):
    """States of an authentication transaction."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    PASSWORD_WARN = "PASSWORD_WARN"
    PASSWORD_EXPIRED = "PASSWORD_EXPIRED"
    RECOVERY = "RECOVERY"
    RECOVERY_CHALLENGE = "RECOVERY_CHALLENGE"
    PASSWORD_RESET = "PASSWORD_RESET"
    LOCKED_OUT = "LOCKED_OUT"
    MFA_ENROLL = "MFA_ENROLL"
    MFA_ENROLL_ACTIVATE = "MFA_ENROLL_ACTIVATE"
    MFA_REQUIRED = "MFA_REQUIRED"
    MFA_CHALLENGE = "MFA_CHALLENGE"
    SUCCESS = "SUCCESS"


TERMINAL_STATUSES = frozenset(
    {AuthenticationStatus.SUCCESS, AuthenticationStatus.LOCKED_OUT}
)


class UserInfo(BaseModel):
    """User summary embedded in a transaction."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    login: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    locale: str | None = None
    time_zone: str | None = None


class AuthenticationTransaction(BaseModel):
    """Immutable snapshot of a transaction after one server round trip."""

    model_config = ConfigDict(frozen=True)

    status: AuthenticationStatus
    state_token: str | None = None
    session_token: str | None = None
    expires_at: datetime | None = None
    factor_result: str | None = None
    relay_state: str | None = None
    user: UserInfo | None = None
    factors: tuple[Factor, ...] = ()
    factor: Factor | None = None
    challenge: FactorChallenge | None = None
    links: tuple[Link, ...] = ()

    @classmethod
    def fresh(cls) -> AuthenticationTransaction:
        """Bootstrap snapshot for a transaction that has not started yet."""
        operation = Operation(name="authenticate", href=AUTHN_PATH)
        return cls(
            status=AuthenticationStatus.UNAUTHENTICATED,
            links=(Link(relation="next", operation=operation),),
        )

    @classmethod
    def resumable(cls, state_token: str) -> AuthenticationTransaction:
        """Bootstrap snapshot that asks the server for the state of ``state_token``."""
        operation = Operation(name="resume", href=AUTHN_PATH)
        return cls(
            status=AuthenticationStatus.UNAUTHENTICATED,
            state_token=state_token,
            links=(Link(relation="next", operation=operation),),
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def relations(self) -> frozenset[str]:
        return frozenset(link.relation for link in self.links)

    def link(self, relation: str) -> Link | None:
        """Return the first link with the given relation, if any."""
        return next((link for link in self.links if link.relation == relation), None)

    def has_link(self, relation: str) -> bool:
        return self.link(relation) is not None

    def get_factor(self, factor_id: str) -> Factor | None:
        """Find an embedded factor by id."""
        candidates = (*self.factors, self.factor) if self.factor else self.factors
        return next((f for f in candidates if f.id == factor_id), None)

    def find_factor(self, factor_type: str, provider: str | None = None) -> Factor | None:
        """Find the first embedded factor of a type, optionally for one provider."""
        for factor in self.factors:
            if factor.factor_type != factor_type:
                continue
            if provider is None or factor.provider == provider:
                return factor
        return None
