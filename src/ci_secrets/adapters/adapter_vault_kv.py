# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""KV wire format adapter for the Vault secret handler.

Hides the difference between the flat KV v1 format and the versioned KV v2
format so the rest of the client never looks at envelope nesting:

- write: KV v2 payloads are wrapped as ``{"data": payload}``
- read: a ``data`` map nested inside the response data is unwrapped; a flat
  map is returned as-is (KV v1, or legacy layouts that nest without
  metadata separation)
- list: KV v2 only lists under ``secret/metadata``, so paths beginning with
  ``secret/data`` are rewritten before the call

All calls are blocking hvac calls; the handler runs them in its thread pool.
Transport errors from hvac and requests propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import hvac

from ci_secrets.enums import PREFIX_VAULT_V2, PREFIX_VAULT_V2_METADATA
from ci_secrets.errors import SecretNotFoundError, SecretShapeError

logger = logging.getLogger(__name__)

ENVELOPE_DATA_KEY = "data"
LIST_KEYS_KEY = "keys"


class AdapterVaultKv:
    """Format-agnostic read/write/list/delete over an hvac client.

    Attributes:
        mount_prefix: Prefix every secret path starts with
        versioned: True when Vault serves the KV v2 format
    """

    def __init__(self, client: hvac.Client, mount_prefix: str, versioned: bool) -> None:
        self._client = client
        self.mount_prefix = mount_prefix
        self.versioned = versioned

    def rewrite_list_path(self, path: str) -> str:
        """Map a data path onto the KV v2 metadata namespace.

        Example:
            >>> adapter.rewrite_list_path("secret/data/org/foo")
            'secret/metadata/org/foo'
            >>> adapter.rewrite_list_path("secret/org/foo")
            'secret/org/foo'
        """
        if path == PREFIX_VAULT_V2 or path.startswith(f"{PREFIX_VAULT_V2}/"):
            return PREFIX_VAULT_V2_METADATA + path[len(PREFIX_VAULT_V2) :]
        return path

    def wrap_payload(self, payload: Mapping[str, object]) -> dict[str, object]:
        """Return the body to write for the configured wire format."""
        if self.versioned:
            return {ENVELOPE_DATA_KEY: dict(payload)}
        return dict(payload)

    def unwrap_envelope(
        self, response: Mapping[str, object] | None, path: str
    ) -> dict[str, object]:
        """Extract the secret fields from an hvac read response.

        Args:
            response: JSON body returned by hvac (None when Vault answered 404)
            path: Path that was read, for error context

        Returns:
            The secret's fields as a plain dict.

        Raises:
            SecretNotFoundError: No envelope at the path.
            SecretShapeError: The response is not a map of secret fields.
        """
        if response is None:
            raise SecretNotFoundError(
                f"secret does not exist at {path}", secret_path=path
            )
        if not isinstance(response, Mapping):
            raise SecretShapeError(
                f"unexpected response type reading {path}",
                secret_path=path,
                response_type=type(response).__name__,
            )

        data = response.get(ENVELOPE_DATA_KEY)
        if data is None:
            raise SecretNotFoundError(
                f"secret does not exist at {path}", secret_path=path
            )
        if not isinstance(data, Mapping):
            raise SecretShapeError(
                f"secret at {path} is not a key/value map",
                secret_path=path,
                response_type=type(data).__name__,
            )

        if ENVELOPE_DATA_KEY in data:
            nested = data[ENVELOPE_DATA_KEY]
            if nested is None:
                # KV v2 answers a deleted version with data=null.
                raise SecretNotFoundError(
                    f"secret does not exist at {path}", secret_path=path
                )
            if isinstance(nested, Mapping):
                return dict(nested)

        return dict(data)

    def read(self, path: str) -> dict[str, object]:
        """Read and unwrap the secret stored at path."""
        logger.debug("Reading secret", extra={"secret_path": path})
        return self.unwrap_envelope(self._client.read(path), path)

    def write(self, path: str, payload: Mapping[str, object]) -> None:
        """Write payload at path in the configured wire format."""
        logger.debug(
            "Writing secret",
            extra={"secret_path": path, "versioned": self.versioned},
        )
        self._client.write_data(path, data=self.wrap_payload(payload))

    def list_keys(self, path: str) -> object | None:
        """List the child keys of path.

        Returns:
            The raw ``keys`` value from Vault (shape is checked by the caller),
            or None when the path does not exist.
        """
        list_path = self.rewrite_list_path(path)
        logger.debug(
            "Listing secrets",
            extra={"secret_path": path, "list_path": list_path},
        )
        response = self._client.list(list_path)
        if response is None:
            return None
        if not isinstance(response, Mapping):
            raise SecretShapeError(
                f"unexpected response type listing {path}",
                secret_path=path,
                response_type=type(response).__name__,
            )
        data = response.get(ENVELOPE_DATA_KEY)
        if not isinstance(data, Mapping):
            return None
        return data.get(LIST_KEYS_KEY)

    def delete(self, path: str) -> None:
        """Delete the secret at path (idempotent at the backend)."""
        logger.debug("Deleting secret", extra={"secret_path": path})
        self._client.delete(path)


__all__: list[str] = ["AdapterVaultKv"]
