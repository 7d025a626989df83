# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Adapters between the secret client and external systems (Vault KV, AWS STS)."""

from ci_secrets.adapters.adapter_aws_iam_identity import AdapterAwsIamIdentity
from ci_secrets.adapters.adapter_vault_kv import AdapterVaultKv

__all__: list[str] = ["AdapterAwsIamIdentity", "AdapterVaultKv"]
