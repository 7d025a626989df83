# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret client utilities: storage paths and the secret codec."""

from ci_secrets.utils.util_secret_codec import (
    secret_from_envelope,
    secret_to_envelope,
)
from ci_secrets.utils.util_secret_merge import merge_secret_update
from ci_secrets.utils.util_vault_path import build_secret_list_path, build_secret_path

__all__: list[str] = [
    "build_secret_list_path",
    "build_secret_path",
    "merge_secret_update",
    "secret_from_envelope",
    "secret_to_envelope",
]
