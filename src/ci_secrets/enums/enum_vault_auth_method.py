# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault authentication method enumeration."""

from enum import Enum


class EnumVaultAuthMethod(str, Enum):
    """Authentication methods that obtain a Vault token at runtime.

    When no method is configured the client runs on a static token.
    """

    AWS = "aws"


__all__ = ["EnumVaultAuthMethod"]
