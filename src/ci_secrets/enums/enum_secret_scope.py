# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret scope enumeration."""

from enum import Enum


class EnumSecretScope(str, Enum):
    """Scope of a secret.

    The scope decides the storage path shape and what the secondary key means:

    - ORG: secondary key is the ``*`` wildcard (org-wide secret)
    - REPO: secondary key is the repository name
    - SHARED: secondary key is the team name
    """

    ORG = "org"
    REPO = "repo"
    SHARED = "shared"


__all__ = ["EnumSecretScope"]
