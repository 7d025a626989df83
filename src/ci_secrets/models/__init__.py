# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret client models."""

from ci_secrets.models.model_aws_iam_login_payload import ModelAwsIamLoginPayload
from ci_secrets.models.model_secret import ModelSecret
from ci_secrets.models.model_vault_credential import ModelVaultCredential

__all__: list[str] = [
    "ModelAwsIamLoginPayload",
    "ModelSecret",
    "ModelVaultCredential",
]
