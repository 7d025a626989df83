# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault token lifecycle: federated login and background renewal.

State machine:
    UNAUTHENTICATED --authenticate()--> AUTHENTICATED

The service only exists when an authentication method is configured; in
static token mode the handler never creates one.

Renewal:
    A single asyncio task wakes every ``token_renewal_interval_seconds``.
    Each tick renews the current token in place for the last known lease.
    If renewal fails (expired, revoked, not found) the full AWS IAM
    handshake runs again. If that fails too the error is logged and the
    previous token is kept until the next tick; nothing is raised out of the
    loop. stop() ends the loop.

Token ownership:
    Only this service writes the token. VaultTokenHolder swaps it on the
    hvac client under a lock; everything else reads it through the client.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import Executor
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import hvac
from pydantic import SecretStr

from ci_secrets.adapters.adapter_aws_iam_identity import AdapterAwsIamIdentity
from ci_secrets.enums import EnumCredentialState, EnumInfraTransportType
from ci_secrets.errors import InfraAuthenticationError, ModelInfraErrorContext
from ci_secrets.models import ModelVaultCredential

if TYPE_CHECKING:
    from ci_secrets.handlers.model_vault_handler_config import ModelVaultHandlerConfig

logger = logging.getLogger(__name__)


class VaultTokenHolder:
    """Lock-protected owner of the current credential.

    The hvac client only ever sees the token value; swap() replaces it in
    place so in-flight callers keep working with whichever token they read.
    """

    def __init__(self, client: hvac.Client) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._credential: ModelVaultCredential | None = None

    @property
    def credential(self) -> ModelVaultCredential | None:
        with self._lock:
            return self._credential

    def swap(self, credential: ModelVaultCredential) -> None:
        """Install a new credential on the holder and the hvac client."""
        with self._lock:
            self._credential = credential
            self._client.token = credential.token.get_secret_value()


class ServiceVaultToken:
    """Obtains and renews the Vault token through the AWS IAM auth method."""

    def __init__(
        self,
        client: hvac.Client,
        config: ModelVaultHandlerConfig,
        identity: AdapterAwsIamIdentity,
        holder: VaultTokenHolder | None = None,
    ) -> None:
        self._client = client
        self._config = config
        self._identity = identity
        self._holder = holder if holder is not None else VaultTokenHolder(client)
        self._state = EnumCredentialState.UNAUTHENTICATED
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> EnumCredentialState:
        return self._state

    @property
    def credential(self) -> ModelVaultCredential | None:
        return self._holder.credential

    @property
    def is_running(self) -> bool:
        """Return True while the renewal loop task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def login_path(self) -> str:
        return f"auth/{self._config.auth_mount}/login"

    def _error_context(
        self, operation: str, correlation_id: UUID | None
    ) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation=operation,
            target_name=self.login_path,
            correlation_id=correlation_id,
        )

    def _credential_from_auth(
        self,
        response: object,
        operation: str,
        correlation_id: UUID | None,
        fallback_token: SecretStr | None = None,
    ) -> ModelVaultCredential:
        """Build a credential from the ``auth`` block of a Vault response."""
        auth = response.get("auth") if isinstance(response, Mapping) else None
        if not isinstance(auth, Mapping):
            raise InfraAuthenticationError(
                "vault failed to return auth information",
                context=self._error_context(operation, correlation_id),
            )

        client_token = auth.get("client_token")
        if isinstance(client_token, str) and client_token:
            token = SecretStr(client_token)
        elif fallback_token is not None:
            token = fallback_token
        else:
            raise InfraAuthenticationError(
                "vault failed to return a token",
                context=self._error_context(operation, correlation_id),
            )

        lease = auth.get("lease_duration")
        lease_seconds = lease if isinstance(lease, int) and lease > 0 else 0
        return ModelVaultCredential(token=token, lease_duration_seconds=lease_seconds)

    def authenticate(self, correlation_id: UUID | None = None) -> ModelVaultCredential:
        """Run the full AWS IAM handshake and install the resulting token.

        Blocking; the handler runs it in its thread pool.

        Raises:
            InfraAuthenticationError: Signing, the login call, or the response
                failed.
        """
        if correlation_id is None:
            correlation_id = uuid4()

        logger.debug(
            "Authenticating with vault",
            extra={
                "auth_method": "aws",
                "login_path": self.login_path,
                "correlation_id": str(correlation_id),
            },
        )

        payload = self._identity.build_login_payload(correlation_id)
        try:
            response = self._client.write_data(
                self.login_path, data=payload.to_request_body()
            )
        except Exception as e:
            raise InfraAuthenticationError(
                f"Failed to get AWS token from vault: {type(e).__name__}",
                context=self._error_context("authenticate", correlation_id),
                role=payload.role,
            ) from e

        credential = self._credential_from_auth(
            response, "authenticate", correlation_id
        )
        self._holder.swap(credential)
        self._state = EnumCredentialState.AUTHENTICATED

        logger.info(
            "Vault token obtained",
            extra={
                "lease_duration_seconds": credential.lease_duration_seconds,
                "correlation_id": str(correlation_id),
            },
        )
        return credential

    def renew(self, correlation_id: UUID | None = None) -> ModelVaultCredential:
        """Renew the current token in place for the last known lease.

        Raises:
            InfraAuthenticationError: Not authenticated yet, or Vault refused
                the renewal.
        """
        if correlation_id is None:
            correlation_id = uuid4()

        current = self._holder.credential
        if self._state is not EnumCredentialState.AUTHENTICATED or current is None:
            raise InfraAuthenticationError(
                "Cannot renew vault token before authenticating",
                context=self._error_context("renew_token", correlation_id),
            )

        increment = (
            f"{current.lease_duration_seconds}s"
            if current.lease_duration_seconds > 0
            else None
        )
        try:
            response = self._client.auth.token.renew_self(increment=increment)
        except Exception as e:
            raise InfraAuthenticationError(
                f"Failed to renew vault token: {type(e).__name__}",
                context=self._error_context("renew_token", correlation_id),
            ) from e

        credential = self._credential_from_auth(
            response, "renew_token", correlation_id, fallback_token=current.token
        )
        self._holder.swap(credential)

        logger.info(
            "Vault token renewed",
            extra={
                "lease_duration_seconds": credential.lease_duration_seconds,
                "correlation_id": str(correlation_id),
            },
        )
        return credential

    def refresh(self, correlation_id: UUID | None = None) -> bool:
        """Renew, falling back to a new handshake. Never raises.

        Returns:
            True if a fresh token is installed, False if the previous token
            was kept.
        """
        if correlation_id is None:
            correlation_id = uuid4()

        try:
            self.renew(correlation_id)
            return True
        except InfraAuthenticationError as e:
            logger.warning(
                "Vault token renewal failed, re-authenticating",
                extra={
                    "error": str(e),
                    "correlation_id": str(correlation_id),
                },
            )

        try:
            self.authenticate(correlation_id)
            return True
        except Exception as e:
            logger.error(
                "failed to refresh vault token",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "correlation_id": str(correlation_id),
                },
            )
            return False

    async def start(self, executor: Executor | None = None) -> None:
        """Start the background renewal loop (no-op if already running)."""
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            self._run_renewal_loop(self._stop_event, executor),
            name="vault-token-renewal",
        )
        logger.info(
            "Vault token renewal loop started",
            extra={
                "interval_seconds": self._config.token_renewal_interval_seconds,
            },
        )

    async def stop(self) -> None:
        """Signal the renewal loop to exit and wait for it."""
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None
            self._stop_event = None
        logger.info("Vault token renewal loop stopped")

    async def _run_renewal_loop(
        self, stop_event: asyncio.Event, executor: Executor | None
    ) -> None:
        loop = asyncio.get_running_loop()
        interval = self._config.token_renewal_interval_seconds

        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except TimeoutError:
                pass
            else:
                break

            correlation_id = uuid4()
            logger.debug(
                "Refreshing vault token",
                extra={"correlation_id": str(correlation_id)},
            )
            try:
                await loop.run_in_executor(executor, self.refresh, correlation_id)
            except Exception:
                # refresh() never raises; this covers a closed executor.
                logger.exception(
                    "Vault token refresh could not be scheduled",
                    extra={"correlation_id": str(correlation_id)},
                )


__all__: list[str] = ["ServiceVaultToken", "VaultTokenHolder"]
