# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory stand-in for hvac.Client.

Implements the subset of the hvac client the secret handler uses (read,
write_data, list, delete, token, auth.token.renew_self) against a dict, and
answers in the JSON layout Vault uses for each KV engine version:

    KV v1   read  -> {"data": {...fields}}
    KV v2   read  -> {"data": {"data": {...fields}, "metadata": {...}}}
    KV v2   list  -> only under secret/metadata/...
    KV v2   delete -> soft delete: the key stays listed and reads return
                     {"data": {"data": None, "metadata": {...}}}
    any     miss  -> None (hvac turns a 404 into None for read/list)

Usage:
    >>> fake = FakeVaultClient()
    >>> with patch("ci_secrets.handlers.handler_vault.hvac.Client", return_value=fake):
    ...     await handler.initialize(config)
"""

from __future__ import annotations

from unittest.mock import MagicMock

import hvac.exceptions

VAULT_URL = "https://vault.example.com:8200"
V2_DATA = "secret/data/"
V2_METADATA = "secret/metadata/"


class FakeVaultClient:
    """Dict-backed fake of the hvac client calls used by the handler."""

    def __init__(self, token: str = "s.fake-token") -> None:
        self.token = token
        self.store: dict[str, dict[str, object]] = {}
        self.calls: list[tuple[str, str]] = []
        self.auth = MagicMock()
        self.fail_next: Exception | None = None
        # KV v2 paths whose latest version was deleted but whose metadata remains.
        self.soft_deleted: set[str] = set()

    def _record(self, method: str, path: str) -> None:
        self.calls.append((method, path))
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def write_data(
        self, path: str, *, data: dict[str, object] | None = None, **kwargs: object
    ) -> None:
        self._record("write", path)
        if path.startswith(V2_DATA):
            if not isinstance(data, dict) or set(data) != {"data"}:
                raise hvac.exceptions.InvalidRequest("no data provided")
        self.store[path] = dict(data or {})
        self.soft_deleted.discard(path)

    def read(self, path: str) -> dict[str, object] | None:
        self._record("read", path)
        body = self.store.get(path)
        if body is None:
            if path in self.soft_deleted:
                return {
                    "data": {
                        "data": None,
                        "metadata": {
                            "version": 1,
                            "deletion_time": "2024-01-01T00:00:00Z",
                            "destroyed": False,
                        },
                    }
                }
            return None
        if path.startswith(V2_DATA):
            return {
                "data": {
                    "data": dict(body["data"]),  # type: ignore[call-overload]
                    "metadata": {"version": 1, "destroyed": False},
                }
            }
        return {"data": dict(body), "lease_duration": 2764800}

    def list(self, path: str) -> dict[str, object] | None:
        self._record("list", path)
        if path.startswith(V2_DATA):
            # Vault does not list under the data namespace.
            return None
        if path.startswith(V2_METADATA):
            path = V2_DATA + path[len(V2_METADATA) :]

        prefix = path.rstrip("/") + "/"
        keys: list[str] = []
        for stored in sorted(set(self.store) | self.soft_deleted):
            if not stored.startswith(prefix):
                continue
            child = stored[len(prefix) :]
            key = child.split("/", 1)[0] + ("/" if "/" in child else "")
            if key not in keys:
                keys.append(key)
        if not keys:
            return None
        return {"data": {"keys": keys}}

    def delete(self, path: str) -> None:
        self._record("delete", path)
        if self.store.pop(path, None) is not None and path.startswith(V2_DATA):
            self.soft_deleted.add(path)

    def seed(self, path: str, body: dict[str, object]) -> None:
        """Store a raw body without recording a call."""
        self.store[path] = body


__all__: list[str] = ["VAULT_URL", "FakeVaultClient"]
