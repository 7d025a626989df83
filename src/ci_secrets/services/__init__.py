# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret client services."""

from ci_secrets.services.service_vault_token import ServiceVaultToken, VaultTokenHolder

__all__: list[str] = ["ServiceVaultToken", "VaultTokenHolder"]
