"""State handler callbacks for authnflow.

Subclass ``AuthenticationStateHandler`` and override the states you care
about; everything else falls through to ``handle_unknown``.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from .models.transaction_models import AuthenticationStatus, AuthenticationTransaction


class AuthenticationStateHandler:
    """One callback per transaction state."""

    def handle_unauthenticated(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_password_warning(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_password_expired(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_recovery(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_recovery_challenge(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_password_reset(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_locked_out(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_mfa_enroll(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_mfa_enroll_activate(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_mfa_required(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_mfa_challenge(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_success(self, transaction: AuthenticationTransaction) -> Any:
        return self.handle_unknown(transaction)

    def handle_unknown(self, transaction: AuthenticationTransaction) -> Any:
        """Fallback for states without a dedicated override."""
        return None


_HANDLER_METHODS = {
    AuthenticationStatus.UNAUTHENTICATED: "handle_unauthenticated",
    AuthenticationStatus.PASSWORD_WARN: "handle_password_warning",
    AuthenticationStatus.PASSWORD_EXPIRED: "handle_password_expired",
    AuthenticationStatus.RECOVERY: "handle_recovery",
    AuthenticationStatus.RECOVERY_CHALLENGE: "handle_recovery_challenge",
    AuthenticationStatus.PASSWORD_RESET: "handle_password_reset",
    AuthenticationStatus.LOCKED_OUT: "handle_locked_out",
    AuthenticationStatus.MFA_ENROLL: "handle_mfa_enroll",
    AuthenticationStatus.MFA_ENROLL_ACTIVATE: "handle_mfa_enroll_activate",
    AuthenticationStatus.MFA_REQUIRED: "handle_mfa_required",
    AuthenticationStatus.MFA_CHALLENGE: "handle_mfa_challenge",
    AuthenticationStatus.SUCCESS: "handle_success",
}


def dispatch(
    transaction: AuthenticationTransaction, handler: AuthenticationStateHandler
) -> Any:
    """Call the handler method for the transaction's status and return its result."""
    method = getattr(handler, _HANDLER_METHODS[transaction.status])
    return method(transaction)
