# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret validation."""

from ci_secrets.validation.validator_secret import validate_secret

__all__: list[str] = ["validate_secret"]
