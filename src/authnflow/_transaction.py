"""Authentication transaction state machine for authnflow.

A ``TransactionHandle`` owns one authentication dialog. It keeps the latest
immutable snapshot, only issues actions the snapshot's links allow, and
replaces the snapshot with whatever the server answers. Round trips on one
handle are serialized by a lock; separate handles share nothing mutable.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable

from ._registry import FactorRegistry
from ._responses import HTTP_SUCCESS_THRESHOLD, parse_error, parse_transaction
from .exceptions import (
    AuthenticationFailedError,
    IllegalTransitionError,
    ValidationError,
    is_lockout,
)
from .handlers import AuthenticationStateHandler, dispatch
from .models.factor_models import PUSH
from .models.transaction_models import AuthenticationStatus, AuthenticationTransaction

if TYPE_CHECKING:
    from ._transport import RawResponse, Transport
    from .models.factor_models import Factor
    from .models.link_models import Link
    from .models.request_models import VerifyFactorRequest

logger = logging.getLogger(__name__)

# Receives the factor the action targets (None for transaction-level links)
PayloadBuilder = Callable[["Factor | None"], dict[str, Any]]

DEFAULT_AUTHN_OPTIONS = {
    "multiOptionalFactorEnroll": False,
    "warnBeforePasswordExpired": False,
}

# Statuses in which each operation on the generic `next` link applies
AUTHENTICATE_STATES = frozenset({AuthenticationStatus.UNAUTHENTICATED})
POLL_STATES = frozenset({AuthenticationStatus.MFA_CHALLENGE})
ACTIVATE_STATES = frozenset({AuthenticationStatus.MFA_ENROLL_ACTIVATE})
CHANGE_PASSWORD_STATES = frozenset(
    {AuthenticationStatus.PASSWORD_EXPIRED, AuthenticationStatus.PASSWORD_WARN}
)
RESET_PASSWORD_STATES = frozenset({AuthenticationStatus.PASSWORD_RESET})
RECOVERY_QUESTION_STATES = frozenset({AuthenticationStatus.RECOVERY})
RECOVERY_CHALLENGE_STATES = frozenset({AuthenticationStatus.RECOVERY_CHALLENGE})


def _require(value: str | None, field: str) -> str:
    if not value:
        msg = f"'{field}' is required"
        raise ValidationError(msg, field=field)
    return value


def _empty(_: Factor | None) -> dict[str, Any]:
    return {}


def _same_factor(candidate: Factor, factor: Factor) -> bool:
    if factor.id is not None:
        return candidate.id == factor.id
    return (
        candidate.factor_type == factor.factor_type
        and candidate.provider == factor.provider
    )


class TransactionHandle:
    """Single-owner handle that advances one authentication transaction."""

    def __init__(
        self,
        transport: Transport,
        registry: FactorRegistry | None = None,
        transaction: AuthenticationTransaction | None = None,
    ) -> None:
        """Initialize a transaction handle.

        Args:
            transport: Transport used for every round trip
            registry: Factor registry; defaults to the built-in factor kinds
            transaction: Starting snapshot; defaults to a fresh transaction

        """
        self._transport = transport
        self._registry = registry or FactorRegistry()
        self._transaction = transaction or AuthenticationTransaction.fresh()
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def transaction(self) -> AuthenticationTransaction:
        """The latest snapshot."""
        return self._transaction

    @property
    def status(self) -> AuthenticationStatus:
        return self._transaction.status

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, handler: AuthenticationStateHandler) -> Any:
        """Hand the current snapshot to the matching handler method."""
        return dispatch(self._transaction, handler)

    # Primary authentication

    async def authenticate(
        self,
        username: str,
        password: str,
        relay_state: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> AuthenticationTransaction:
        """Start the transaction with a username and password.

        Args:
            username: User's login
            password: User's password
            relay_state: Opaque value returned with the transaction
            options: Overrides for ``multiOptionalFactorEnroll`` and
                ``warnBeforePasswordExpired``

        Returns:
            The snapshot the server answers with (``MFA_REQUIRED``,
            ``SUCCESS``, ``PASSWORD_EXPIRED``, ...).

        """
        _require(username, "username")
        _require(password, "password")

        def build(_: Factor | None) -> dict[str, Any]:
            payload: dict[str, Any] = {
                "username": username,
                "password": password,
                "options": {**DEFAULT_AUTHN_OPTIONS, **(options or {})},
            }
            if relay_state is not None:
                payload["relayState"] = relay_state
            return payload

        return await self._submit("next", build, states=AUTHENTICATE_STATES)

    # Factor challenge and verification

    async def select_factor(
        self, factor: Factor, auto_push: bool | None = None
    ) -> AuthenticationTransaction:
        """Ask the server to challenge ``factor`` (send a code, start a push, ...)."""
        return await self._submit(
            "verify", _empty, factor=factor, query={"autoPush": auto_push}
        )

    async def verify_factor(
        self,
        request: VerifyFactorRequest,
        factor: Factor | None = None,
        *,
        remember_device: bool | None = None,
        auto_push: bool | None = None,
    ) -> AuthenticationTransaction:
        """Submit a factor verification.

        In ``MFA_CHALLENGE`` the challenged factor is verified through the
        ``next`` link and ``factor`` may be omitted. In ``MFA_REQUIRED`` the
        given factor's own ``verify`` link is used.

        Raises:
            IllegalTransitionError: If the current links do not allow it.
            ValidationError: If ``request`` does not fit the factor or is
                incomplete. Raised before anything is sent.
            AuthenticationFailedError: If the server rejects the code; the
                handle keeps its current snapshot.

        """

        def build(target: Factor | None) -> dict[str, Any]:
            if target is None:
                msg = "No factor to verify; pass the factor to verify_factor()"
                raise ValidationError(msg, field="factorType")
            self._registry.check_request(target, request)
            return request.build()

        return await self._submit(
            "verify",
            build,
            factor=factor,
            query={"rememberDevice": remember_device, "autoPush": auto_push},
            challenge=True,
        )

    async def poll(self) -> AuthenticationTransaction:
        """Poll a pending push verification."""
        challenged = self._transaction.factor
        if challenged is None or challenged.factor_type != PUSH:
            msg = f"No push verification to poll in state {self.status.value}"
            raise IllegalTransitionError("next", self.status, msg)
        return await self._submit("next", _empty, states=POLL_STATES)

    async def resend(self) -> AuthenticationTransaction:
        """Resend the challenge for the factor being verified."""
        return await self._submit("resend", _empty)

    # Enrollment

    async def enroll_factor(
        self,
        factor_type: str,
        provider: str,
        profile: dict[str, Any] | None = None,
    ) -> AuthenticationTransaction:
        """Enroll one of the factors offered in ``MFA_ENROLL``."""
        factor = self._transaction.find_factor(factor_type, provider)
        if factor is None:
            msg = f"Factor '{factor_type}' from '{provider}' is not offered for enrollment"
            raise IllegalTransitionError("enroll", self.status, msg)

        def build(_: Factor | None) -> dict[str, Any]:
            payload: dict[str, Any] = {"factorType": factor_type, "provider": provider}
            if profile:
                payload["profile"] = profile
            return payload

        return await self._submit("enroll", build, factor=factor)

    async def activate_factor(self, pass_code: str) -> AuthenticationTransaction:
        """Activate a newly enrolled factor with its first code."""
        _require(pass_code, "passCode")
        return await self._submit(
            "next", lambda _: {"passCode": pass_code}, states=ACTIVATE_STATES
        )

    # Password and recovery

    async def change_password(
        self, old_password: str, new_password: str
    ) -> AuthenticationTransaction:
        _require(old_password, "oldPassword")
        _require(new_password, "newPassword")
        return await self._submit(
            "next",
            lambda _: {"oldPassword": old_password, "newPassword": new_password},
            states=CHANGE_PASSWORD_STATES,
        )

    async def reset_password(self, new_password: str) -> AuthenticationTransaction:
        _require(new_password, "newPassword")
        return await self._submit(
            "next", lambda _: {"newPassword": new_password}, states=RESET_PASSWORD_STATES
        )

    async def answer_recovery_question(self, answer: str) -> AuthenticationTransaction:
        _require(answer, "answer")
        return await self._submit(
            "next", lambda _: {"answer": answer}, states=RECOVERY_QUESTION_STATES
        )

    async def verify_recovery(self, pass_code: str) -> AuthenticationTransaction:
        _require(pass_code, "passCode")
        return await self._submit(
            "next", lambda _: {"passCode": pass_code}, states=RECOVERY_CHALLENGE_STATES
        )

    # Navigation

    async def skip(self) -> AuthenticationTransaction:
        return await self._submit("skip", _empty)

    async def previous(self) -> AuthenticationTransaction:
        return await self._submit("prev", _empty)

    async def follow(
        self, relation: str, payload: dict[str, Any] | None = None
    ) -> AuthenticationTransaction:
        """Follow any advertised link with an optional payload."""
        return await self._submit(relation, lambda _: dict(payload or {}))

    async def cancel(self) -> None:
        """Cancel the transaction and close the handle."""
        async with self._lock:
            transaction = self._transaction
            link, _ = self._resolve(transaction, "cancel", None, challenge=False)
            raw = await self._transport.submit(link.operation, self._envelope(transaction, {}))
            if raw.status_code >= HTTP_SUCCESS_THRESHOLD:
                raise parse_error(raw.status_code, raw.body, raw.headers)
            self._closed = True
            logger.info("Transaction cancelled in state %s", transaction.status.value)

    # Internals

    async def _submit(
        self,
        relation: str,
        build: PayloadBuilder,
        *,
        factor: Factor | None = None,
        query: dict[str, bool | None] | None = None,
        challenge: bool = False,
        states: frozenset[AuthenticationStatus] | None = None,
    ) -> AuthenticationTransaction:
        async with self._lock:
            transaction = self._transaction
            if states is not None and transaction.status not in states:
                allowed = ", ".join(sorted(s.value for s in states))
                msg = f"Not allowed in state {transaction.status.value} (only {allowed})"
                raise IllegalTransitionError(relation, transaction.status, msg)
            link, target = self._resolve(transaction, relation, factor, challenge=challenge)
            payload = self._envelope(transaction, build(target))
            operation = link.operation.with_query(**(query or {}))
            logger.debug(
                "Submitting '%s' (%s) from state %s",
                link.relation,
                operation.name,
                transaction.status.value,
            )
            raw = await self._transport.submit(operation, payload)
            return self._apply(transaction, raw)

    def _resolve(
        self,
        transaction: AuthenticationTransaction,
        relation: str,
        factor: Factor | None,
        *,
        challenge: bool,
    ) -> tuple[Link, Factor | None]:
        """Find the link to follow and the factor it acts on.

        Raises:
            IllegalTransitionError: If the handle is closed or the current
                snapshot does not offer the action.

        """
        if self._closed:
            raise IllegalTransitionError(relation, None, "Transaction handle is closed")

        status = transaction.status
        if challenge and status is AuthenticationStatus.MFA_CHALLENGE:
            challenged = transaction.factor
            if factor is None or (challenged is not None and _same_factor(challenged, factor)):
                link = transaction.link("next")
                if link is None:
                    raise IllegalTransitionError("next", status)
                return link, challenged

        if factor is None:
            link = transaction.link(relation)
            if link is None:
                raise IllegalTransitionError(relation, status)
            return link, None

        current = next((f for f in transaction.factors if _same_factor(f, factor)), None)
        link = current.link(relation) if current is not None else None
        if link is None:
            msg = (
                f"Action '{relation}' is not available for factor "
                f"'{factor.factor_type}' in state {status.value}"
            )
            raise IllegalTransitionError(relation, status, msg)
        return link, current

    @staticmethod
    def _envelope(
        transaction: AuthenticationTransaction, payload: dict[str, Any]
    ) -> dict[str, Any]:
        if transaction.state_token:
            return {"stateToken": transaction.state_token, **payload}
        return payload

    def _apply(
        self, previous: AuthenticationTransaction, raw: RawResponse
    ) -> AuthenticationTransaction:
        if raw.status_code < HTTP_SUCCESS_THRESHOLD:
            current = parse_transaction(raw.body, self._registry)
        elif is_lockout(raw.body):
            current = AuthenticationTransaction(status=AuthenticationStatus.LOCKED_OUT)
            logger.warning("Transaction locked out in state %s", previous.status.value)
        else:
            error = parse_error(raw.status_code, raw.body, raw.headers)
            if isinstance(error, AuthenticationFailedError):
                error.transaction = previous
                logger.warning(
                    "Authentication failed in state %s (%s)",
                    previous.status.value,
                    error.code,
                )
            raise error

        logger.info("Transaction %s -> %s", previous.status.value, current.status.value)
        self._transaction = current
        return current
