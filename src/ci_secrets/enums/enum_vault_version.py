# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault KV secrets engine version enumeration."""

from enum import Enum

PREFIX_VAULT_V1: str = "secret"
PREFIX_VAULT_V2: str = "secret/data"
PREFIX_VAULT_V2_METADATA: str = "secret/metadata"


class EnumVaultVersion(str, Enum):
    """Supported KV wire formats.

    V1 stores the secret fields flat at the path. V2 nests them under a
    ``data`` key and serves directory listings from the ``metadata`` namespace.
    """

    V1 = "1"
    V2 = "2"

    @property
    def system_prefix(self) -> str:
        """Return the mount prefix every path starts with for this version."""
        if self is EnumVaultVersion.V2:
            return PREFIX_VAULT_V2
        return PREFIX_VAULT_V1


__all__ = [
    "EnumVaultVersion",
    "PREFIX_VAULT_V1",
    "PREFIX_VAULT_V2",
    "PREFIX_VAULT_V2_METADATA",
]
