# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault credential model: a token and its lease."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelVaultCredential(BaseModel):
    """Vault access token obtained from an auth method.

    Attributes:
        token: Vault client token (SecretStr)
        lease_duration_seconds: Lease granted by Vault for the token
        issued_at: Wall clock time (``time.time()``) the lease started
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    token: SecretStr
    lease_duration_seconds: int = Field(ge=0)
    issued_at: float = Field(default_factory=time.time)

    @property
    def expires_at(self) -> float:
        return self.issued_at + self.lease_duration_seconds

    def is_expired(self, now: float | None = None) -> bool:
        """Return True once the lease has run out."""
        current = time.time() if now is None else now
        return current >= self.expires_at


__all__: list[str] = ["ModelVaultCredential"]
