# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Vault secret handler for CI secrets, using the hvac client.

Stores org, repo and shared secrets in a Vault KV secrets engine (v1 or v2)
and keeps a Vault token alive through the AWS IAM auth method when one is
configured.

Security Features:
    - SecretStr protection for tokens and secret values
    - Sanitized error messages (secret identity only, never values or payloads)
    - SSL verification enabled by default
    - Background token renewal with re-authentication fallback

Operations:
    create_secret, get_secret, update_secret, delete_secret, list_secrets,
    count_secrets. Each one computes the storage path for the secret's scope,
    goes through the KV format adapter, and converts the stored map to and
    from ModelSecret. Nothing is retried; callers own the retry policy.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar, assert_never
from uuid import UUID, uuid4

import hvac
import requests
from pydantic import SecretStr, ValidationError

from ci_secrets.adapters import AdapterAwsIamIdentity, AdapterVaultKv
from ci_secrets.enums import EnumInfraTransportType, EnumSecretScope
from ci_secrets.errors import (
    InfraAuthenticationError,
    InfraVaultError,
    ModelInfraErrorContext,
    ProtocolConfigurationError,
    RuntimeHostError,
    SecretNotFoundError,
    SecretShapeError,
    SecretValidationError,
)
from ci_secrets.handlers.model_vault_handler_config import ModelVaultHandlerConfig
from ci_secrets.models import ModelSecret
from ci_secrets.services import ServiceVaultToken
from ci_secrets.utils import (
    build_secret_list_path,
    build_secret_path,
    merge_secret_update,
    secret_from_envelope,
    secret_to_envelope,
)
from ci_secrets.validation import validate_secret

T = TypeVar("T")

logger = logging.getLogger(__name__)

HANDLER_ID_VAULT: str = "vault-secrets"
TARGET_NAME: str = "vault_secrets"

SUPPORTED_OPERATIONS: frozenset[str] = frozenset(
    {
        "vault.create_secret",
        "vault.get_secret",
        "vault.update_secret",
        "vault.delete_secret",
        "vault.list_secrets",
        "vault.count_secrets",
    }
)


class HandlerVaultSecrets:
    """CI secret store backed by HashiCorp Vault.

    Lifecycle:
        handler = HandlerVaultSecrets()
        await handler.initialize(config)   # validates config, logs in if needed
        ...
        await handler.shutdown()           # stops renewal, closes thread pool

    Authentication:
        - Static token mode: no auth_method; the configured token is used as-is
        - AWS mode: the token comes from auth/aws/login at initialize() and is
          renewed by ServiceVaultToken every token_renewal_interval_seconds.
          A failed login at initialize() raises InfraAuthenticationError;
          later failures are logged and the previous token is kept.

    Thread Pool:
        hvac is synchronous; every Vault call runs in a bounded
        ThreadPoolExecutor (max_concurrent_operations workers).
    """

    def __init__(self) -> None:
        self._client: hvac.Client | None = None
        self._config: ModelVaultHandlerConfig | None = None
        self._kv: AdapterVaultKv | None = None
        self._token_service: ServiceVaultToken | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._max_workers: int = 0
        self._initialized: bool = False

    @property
    def max_workers(self) -> int:
        """Return thread pool max workers."""
        return self._max_workers

    @property
    def token_service(self) -> ServiceVaultToken | None:
        """Return the token service (None in static token mode)."""
        return self._token_service

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def _create_init_error_context(self, correlation_id: UUID) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation="initialize",
            target_name=TARGET_NAME,
            correlation_id=correlation_id,
        )

    def _parse_vault_config(
        self,
        config: dict[str, object] | ModelVaultHandlerConfig,
        correlation_id: UUID,
    ) -> ModelVaultHandlerConfig:
        """Parse and validate vault configuration.

        Raises:
            ProtocolConfigurationError: If Pydantic validation fails
        """
        if isinstance(config, ModelVaultHandlerConfig):
            return config

        try:
            token_raw = config.get("token")
            if isinstance(token_raw, str):
                config = dict(config)
                config["token"] = SecretStr(token_raw)

            return ModelVaultHandlerConfig.model_validate(config)
        except ValidationError as e:
            raise ProtocolConfigurationError(
                f"Invalid Vault configuration: {e}",
                context=self._create_init_error_context(correlation_id),
            ) from e

    def _create_hvac_client(self, config: ModelVaultHandlerConfig) -> hvac.Client:
        return hvac.Client(
            url=config.url,
            token=config.token.get_secret_value() if config.token else "",
            namespace=config.namespace,
            verify=config.verify_ssl,
            timeout=config.timeout_seconds,
        )

    def _setup_thread_pool(self, config: ModelVaultHandlerConfig) -> None:
        self._max_workers = config.max_concurrent_operations
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="vault_secrets_",
        )

    def _create_token_service(
        self, client: hvac.Client, config: ModelVaultHandlerConfig
    ) -> ServiceVaultToken:
        identity = AdapterAwsIamIdentity(
            role=config.aws_role or "",
            region=config.aws_region,
        )
        return ServiceVaultToken(client, config, identity)

    def _log_init_success(
        self, config: ModelVaultHandlerConfig, correlation_id: UUID
    ) -> None:
        logger.info(
            "%s initialized successfully",
            self.__class__.__name__,
            extra={
                "handler": self.__class__.__name__,
                "url": config.url,
                "version": config.version.value,
                "mount_prefix": config.mount_prefix,
                "auth_method": config.auth_method.value if config.auth_method else None,
                "namespace": config.namespace,
                "timeout_seconds": config.timeout_seconds,
                "verify_ssl": config.verify_ssl,
                "thread_pool_max_workers": self._max_workers,
                "correlation_id": str(correlation_id),
            },
        )

    async def initialize(
        self, config: dict[str, object] | ModelVaultHandlerConfig
    ) -> None:
        """Initialize the Vault client with configuration.

        Args:
            config: ModelVaultHandlerConfig, or a raw dict with its fields:
                - url: Vault server URL (required)
                - version: "1" or "2" (required)
                - token: static Vault token (required unless auth_method set)
                - prefix: optional administrator path prefix
                - auth_method: "aws" to log in via AWS IAM
                - aws_role: Vault role for the AWS login
                - token_renewal_interval_seconds: renewal period (default 300)

        Raises:
            ProtocolConfigurationError: If configuration validation fails.
            InfraAuthenticationError: If the initial AWS IAM login fails.
            RuntimeHostError: If client initialization fails for other reasons.
        """
        init_correlation_id = uuid4()

        if self._initialized:
            # Stop the previous renewal task and thread pool before replacing them.
            await self.shutdown()

        logger.info(
            "Initializing %s",
            self.__class__.__name__,
            extra={
                "handler": self.__class__.__name__,
                "correlation_id": str(init_correlation_id),
            },
        )

        parsed = self._parse_vault_config(config, init_correlation_id)

        try:
            client = self._create_hvac_client(parsed)
            self._setup_thread_pool(parsed)
            kv = AdapterVaultKv(client, parsed.mount_prefix, parsed.is_versioned)

            if parsed.auth_method is not None:
                # Tracked before start() so a failed start is still stopped.
                self._token_service = self._create_token_service(client, parsed)
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(
                    self._executor,
                    self._token_service.authenticate,
                    init_correlation_id,
                )
                await self._token_service.start(self._executor)

        except InfraAuthenticationError:
            await self._release_resources()
            raise
        except Exception as e:
            await self._release_resources()
            raise RuntimeHostError(
                f"Failed to initialize Vault client: {type(e).__name__}",
                context=self._create_init_error_context(init_correlation_id),
            ) from e

        self._config = parsed
        self._client = client
        self._kv = kv
        self._initialized = True
        self._log_init_success(parsed, init_correlation_id)

    async def _release_resources(self) -> None:
        if self._token_service is not None:
            await self._token_service.stop()
            self._token_service = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    async def shutdown(self) -> None:
        """Stop token renewal and release the Vault client and thread pool."""
        await self._release_resources()
        self._client = None
        self._kv = None
        self._initialized = False
        self._config = None
        logger.info("HandlerVaultSecrets shutdown complete")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _create_vault_error_context(
        self, operation: str, correlation_id: UUID
    ) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation=operation,
            target_name=TARGET_NAME,
            correlation_id=correlation_id,
        )

    def _require_initialized(
        self, operation: str, correlation_id: UUID
    ) -> tuple[ModelVaultHandlerConfig, AdapterVaultKv]:
        if not self._initialized or self._config is None or self._kv is None:
            raise RuntimeHostError(
                "HandlerVaultSecrets not initialized. Call initialize() first.",
                context=self._create_vault_error_context(operation, correlation_id),
            )
        return self._config, self._kv

    def _coerce_scope(
        self,
        scope: EnumSecretScope | str,
        operation: str,
        correlation_id: UUID,
    ) -> EnumSecretScope:
        if isinstance(scope, EnumSecretScope):
            return scope
        try:
            return EnumSecretScope(scope)
        except ValueError as e:
            raise SecretValidationError(
                f"invalid secret type: {scope}",
                context=self._create_vault_error_context(operation, correlation_id),
            ) from e

    @staticmethod
    def _stamp_identity(
        secret: ModelSecret, scope: EnumSecretScope, org: str, secondary: str
    ) -> ModelSecret:
        """Copy the identity from the call arguments onto the secret."""
        match scope:
            case EnumSecretScope.ORG | EnumSecretScope.REPO:
                identity = {"type": scope, "org": org, "repo": secondary}
            case EnumSecretScope.SHARED:
                identity = {"type": scope, "org": org, "team": secondary}
            case _:
                assert_never(scope)
        return secret.model_copy(update=identity)

    @staticmethod
    def _describe(scope: EnumSecretScope, org: str, secondary: str, name: str) -> str:
        return f"{scope.value} secret {org}/{secondary}/{name}"

    async def _execute(
        self,
        operation: str,
        func: Callable[[], T],
        correlation_id: UUID,
        message: str,
        secret_path: str,
        **identity: object,
    ) -> T:
        """Run a blocking Vault call in the thread pool and translate failures.

        Errors already in the client taxonomy pass through; hvac and requests
        failures become InfraVaultError carrying the secret identity.
        """
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, func)
        except RuntimeHostError:
            raise
        except (hvac.exceptions.VaultError, requests.exceptions.RequestException) as e:
            logger.warning(
                "Vault operation failed",
                extra={
                    "operation": operation,
                    "error_type": type(e).__name__,
                    "secret_path": secret_path,
                    "correlation_id": str(correlation_id),
                },
            )
            raise InfraVaultError(
                f"{message}: {type(e).__name__}",
                context=self._create_vault_error_context(operation, correlation_id),
                secret_path=secret_path,
                **identity,
            ) from e

    # -------------------------------------------------------------------------
    # Secret operations
    # -------------------------------------------------------------------------

    async def create_secret(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
        secret: ModelSecret,
    ) -> ModelSecret:
        """Create a secret.

        The secret's type, org and repo/team are taken from the arguments.

        Args:
            scope: Secret scope
            org: Owner organization
            secondary: Repository name, team name, or ``*`` for org scope
            secret: Secret to store (name and value required)

        Returns:
            The secret as written.

        Raises:
            SecretValidationError: Missing required fields or invalid scope.
            InfraVaultError: The write failed.
        """
        operation = "vault.create_secret"
        correlation_id = uuid4()
        config, kv = self._require_initialized(operation, correlation_id)
        sec_scope = self._coerce_scope(scope, operation, correlation_id)

        stamped = self._stamp_identity(secret, sec_scope, org, secondary)
        validate_secret(
            stamped, self._create_vault_error_context(operation, correlation_id)
        )
        name = stamped.name or ""

        path = build_secret_path(config.mount_prefix, sec_scope, org, secondary, name)
        envelope = secret_to_envelope(stamped)

        logger.debug(
            "Creating secret",
            extra={
                "scope": sec_scope.value,
                "org": org,
                "secondary": secondary,
                "secret_name": name,
                "secret_path": path,
                "correlation_id": str(correlation_id),
            },
        )

        await self._execute(
            operation,
            lambda: kv.write(path, envelope),
            correlation_id,
            f"Failed to create {self._describe(sec_scope, org, secondary, name)}",
            path,
            scope=sec_scope.value,
            org=org,
            secondary=secondary,
            secret_name=name,
        )
        return stamped

    async def get_secret(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
        name: str,
    ) -> ModelSecret:
        """Fetch a single secret.

        Raises:
            SecretNotFoundError: No secret is stored at the path.
            SecretValidationError: Invalid scope.
            InfraVaultError: The read failed.
        """
        operation = "vault.get_secret"
        correlation_id = uuid4()
        config, kv = self._require_initialized(operation, correlation_id)
        sec_scope = self._coerce_scope(scope, operation, correlation_id)

        path = build_secret_path(config.mount_prefix, sec_scope, org, secondary, name)
        description = self._describe(sec_scope, org, secondary, name)

        logger.debug(
            "Getting secret",
            extra={
                "scope": sec_scope.value,
                "org": org,
                "secondary": secondary,
                "secret_name": name,
                "secret_path": path,
                "correlation_id": str(correlation_id),
            },
        )

        try:
            envelope = await self._execute(
                operation,
                lambda: kv.read(path),
                correlation_id,
                f"Failed to get {description}",
                path,
                scope=sec_scope.value,
                org=org,
                secondary=secondary,
                secret_name=name,
            )
        except SecretNotFoundError as e:
            raise SecretNotFoundError(
                f"{description} does not exist",
                context=self._create_vault_error_context(operation, correlation_id),
                scope=sec_scope.value,
                org=org,
                secondary=secondary,
                secret_name=name,
                secret_path=path,
            ) from e

        return secret_from_envelope(envelope)

    async def update_secret(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
        secret: ModelSecret,
    ) -> ModelSecret:
        """Update a secret with read-modify-write.

        Only fields set on ``secret`` are overlaid onto the stored secret (see
        merge_secret_update); the merged result is validated before writing.

        Returns:
            The merged secret as written.

        Raises:
            SecretNotFoundError: The secret does not exist.
            SecretValidationError: The merged secret is invalid.
            InfraVaultError: The read or write failed.
        """
        operation = "vault.update_secret"
        correlation_id = uuid4()
        config, kv = self._require_initialized(operation, correlation_id)
        sec_scope = self._coerce_scope(scope, operation, correlation_id)

        if not secret.name:
            raise SecretValidationError(
                "empty secret name provided",
                context=self._create_vault_error_context(operation, correlation_id),
            )
        name = secret.name

        current = await self.get_secret(sec_scope, org, secondary, name)
        merged = self._stamp_identity(
            merge_secret_update(current, secret), sec_scope, org, secondary
        ).model_copy(update={"name": name})
        validate_secret(
            merged, self._create_vault_error_context(operation, correlation_id)
        )

        path = build_secret_path(config.mount_prefix, sec_scope, org, secondary, name)
        envelope = secret_to_envelope(merged)

        logger.debug(
            "Updating secret",
            extra={
                "scope": sec_scope.value,
                "org": org,
                "secondary": secondary,
                "secret_name": name,
                "updated_fields": sorted(secret.model_fields_set),
                "correlation_id": str(correlation_id),
            },
        )

        await self._execute(
            operation,
            lambda: kv.write(path, envelope),
            correlation_id,
            f"Failed to update {self._describe(sec_scope, org, secondary, name)}",
            path,
            scope=sec_scope.value,
            org=org,
            secondary=secondary,
            secret_name=name,
        )
        return merged

    async def delete_secret(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
        name: str,
    ) -> None:
        """Delete a secret. Deleting a missing secret is not an error."""
        operation = "vault.delete_secret"
        correlation_id = uuid4()
        config, kv = self._require_initialized(operation, correlation_id)
        sec_scope = self._coerce_scope(scope, operation, correlation_id)

        path = build_secret_path(config.mount_prefix, sec_scope, org, secondary, name)

        logger.debug(
            "Deleting secret",
            extra={
                "scope": sec_scope.value,
                "secret_path": path,
                "correlation_id": str(correlation_id),
            },
        )

        await self._execute(
            operation,
            lambda: kv.delete(path),
            correlation_id,
            f"Failed to delete {self._describe(sec_scope, org, secondary, name)}",
            path,
            scope=sec_scope.value,
            org=org,
            secondary=secondary,
            secret_name=name,
        )

    async def _list_secret_names(
        self,
        operation: str,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
        correlation_id: UUID,
    ) -> tuple[EnumSecretScope, list[str]]:
        config, kv = self._require_initialized(operation, correlation_id)
        sec_scope = self._coerce_scope(scope, operation, correlation_id)

        path = build_secret_list_path(config.mount_prefix, sec_scope, org, secondary)
        description = f"{sec_scope.value} secrets for {org}/{secondary}"
        identity: dict[str, object] = {
            "scope": sec_scope.value,
            "org": org,
            "secondary": secondary,
        }

        keys = await self._execute(
            operation,
            lambda: kv.list_keys(path),
            correlation_id,
            f"Failed to list {description}",
            path,
            **identity,
        )

        ctx = self._create_vault_error_context(operation, correlation_id)
        if keys is None:
            raise SecretNotFoundError(
                f"no {description} found", context=ctx, secret_path=path, **identity
            )
        if not isinstance(keys, list):
            raise SecretShapeError(
                f"listing {description} did not return a list of secrets",
                context=ctx,
                secret_path=path,
                response_type=type(keys).__name__,
                **identity,
            )
        if not keys:
            # Vault answers a missing path with 404; an empty key list is unexpected.
            raise SecretNotFoundError(
                f"no {description} found", context=ctx, secret_path=path, **identity
            )

        names = [key for key in keys if isinstance(key, str)]
        logger.debug(
            "Listed secrets",
            extra={
                **identity,
                "count": len(names),
                "correlation_id": str(correlation_id),
            },
        )
        return sec_scope, names

    async def list_secrets(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
    ) -> list[ModelSecret]:
        """List every secret of one owner.

        Vault has no bulk read, so each listed key is fetched with
        get_secret (one list call plus one read per secret). KV v2 keeps
        the metadata of a deleted secret, so listed keys whose read finds
        nothing are left out.

        Raises:
            SecretNotFoundError: Nothing stored for the owner.
            SecretShapeError: Vault returned something other than a key list.
            InfraVaultError: A list or read call failed.
        """
        correlation_id = uuid4()
        sec_scope, names = await self._list_secret_names(
            "vault.list_secrets", scope, org, secondary, correlation_id
        )
        secrets: list[ModelSecret] = []
        for name in names:
            try:
                secrets.append(
                    await self.get_secret(sec_scope, org, secondary, name)
                )
            except SecretNotFoundError:
                logger.debug(
                    "Skipping listed secret with no current version",
                    extra={
                        "scope": sec_scope.value,
                        "org": org,
                        "secondary": secondary,
                        "secret_name": name,
                        "correlation_id": str(correlation_id),
                    },
                )
        return secrets

    async def count_secrets(
        self,
        scope: EnumSecretScope | str,
        org: str,
        secondary: str,
    ) -> int:
        """Count the secrets of one owner without reading them."""
        correlation_id = uuid4()
        _, names = await self._list_secret_names(
            "vault.count_secrets", scope, org, secondary, correlation_id
        )
        return len(names)

    def describe(self) -> dict[str, object]:
        """Return handler metadata and capabilities (no credentials)."""
        token_service = self._token_service
        return {
            "handler_id": HANDLER_ID_VAULT,
            "supported_operations": sorted(SUPPORTED_OPERATIONS),
            "initialized": self._initialized,
            "version": self._config.version.value if self._config else None,
            "mount_prefix": self._config.mount_prefix if self._config else None,
            "auth_method": (
                self._config.auth_method.value
                if self._config and self._config.auth_method
                else None
            ),
            "token_state": token_service.state.value if token_service else None,
            "token_renewal_running": (
                token_service.is_running if token_service else False
            ),
        }


__all__: list[str] = ["HANDLER_ID_VAULT", "HandlerVaultSecrets"]
