# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for ci_secrets unit tests.

Available Utilities:
    FakeVaultClient: In-memory hvac client speaking the KV v1 and v2 layouts
    assert_has_async_methods: Duck typing check for async interfaces
"""

from tests.helpers.fake_vault import VAULT_URL, FakeVaultClient
from tests.helpers.util_assertions import assert_has_async_methods

__all__: list[str] = ["VAULT_URL", "FakeVaultClient", "assert_has_async_methods"]
