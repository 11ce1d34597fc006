"""authnflow client entry points.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Self

from ._registry import FactorRegistry
from ._transaction import TransactionHandle
from ._transport import HttpTransport, Transport
from .config import ClientConfig
from .exceptions import IllegalTransitionError
from .models.request_models import VerifyFactorRequest
from .models.transaction_models import AuthenticationStatus, AuthenticationTransaction


class AuthenticationClient:
    """Factory for transaction handles bound to one transport."""

    def __init__(
        self,
        transport: Transport,
        *,
        registry: FactorRegistry | None = None,
    ) -> None:
        """Initialize the authentication client.

        Args:
            transport: Transport shared by every transaction this client starts
            registry: Factor registry; defaults to the built-in factor kinds

        """
        self._transport = transport
        self.registry = registry or FactorRegistry()
        self._owned_transport: HttpTransport | None = None

    @classmethod
    def from_config(
        cls, config: ClientConfig, *, registry: FactorRegistry | None = None
    ) -> Self:
        """Build a client with an ``HttpTransport`` it owns and closes."""
        transport = HttpTransport(
            config.org_url,
            timeout=config.timeout,
            api_key=config.api_key,
            user_agent=config.user_agent,
        )
        client = cls(transport, registry=registry)
        client._owned_transport = transport
        return client

    @classmethod
    def from_url(
        cls,
        org_url: str,
        *,
        timeout: float = 30.0,
        api_key: str | None = None,
        registry: FactorRegistry | None = None,
    ) -> Self:
        """Build a client from an org URL.

        Args:
            org_url: Base URL of the authentication server
            timeout: Request timeout in seconds
            api_key: Optional API token

        """
        config = ClientConfig(org_url=org_url, timeout=timeout, api_key=api_key)
        return cls.from_config(config, registry=registry)

    async def __aenter__(self) -> Self:
        """Async context manager entry.

        Returns:
            The client instance.

        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owned_transport is not None:
            await self._owned_transport.close()

    def new_transaction(self) -> TransactionHandle:
        """Return a handle in the fresh ``UNAUTHENTICATED`` state."""
        return TransactionHandle(self._transport, self.registry)

    async def authenticate(
        self,
        username: str,
        password: str,
        relay_state: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> TransactionHandle:
        """Start a new transaction with primary credentials.

        Returns:
            The handle, already advanced past primary authentication.

        """
        handle = self.new_transaction()
        await handle.authenticate(username, password, relay_state, options)
        return handle

    async def resume(self, state_token: str) -> TransactionHandle:
        """Recover a transaction from a persisted state token."""
        handle = TransactionHandle(
            self._transport,
            self.registry,
            AuthenticationTransaction.resumable(state_token),
        )
        await handle.follow("next")
        return handle

    async def verify_factor(
        self,
        factor_type: str,
        state_token: str,
        request: VerifyFactorRequest | None = None,
        *,
        remember_device: bool | None = None,
    ) -> TransactionHandle:
        """Resume ``state_token`` and challenge or verify its ``factor_type`` factor.

        Without a ``request`` the factor is only challenged, which is how a
        WebAuthn challenge is fetched before the assertion exists.
        """
        handle = await self.resume(state_token)
        transaction = handle.transaction

        if transaction.status is AuthenticationStatus.MFA_CHALLENGE:
            challenged = transaction.factor
            if challenged is None or challenged.factor_type != factor_type:
                msg = f"Transaction is not challenging a '{factor_type}' factor"
                raise IllegalTransitionError("verify", transaction.status, msg)
            if request is not None:
                await handle.verify_factor(request, remember_device=remember_device)
            return handle

        factor = transaction.find_factor(factor_type)
        if factor is None:
            msg = f"No '{factor_type}' factor in state {transaction.status.value}"
            raise IllegalTransitionError("verify", transaction.status, msg)
        if request is None:
            await handle.select_factor(factor)
        else:
            await handle.verify_factor(request, factor, remember_device=remember_device)
        return handle
