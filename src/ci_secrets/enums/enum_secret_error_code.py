# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error codes carried by the secret client error hierarchy."""

from enum import Enum


class EnumSecretErrorCode(str, Enum):
    """Classification codes for RuntimeHostError and its subclasses."""

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INVALID_RESPONSE_SHAPE = "INVALID_RESPONSE_SHAPE"


__all__ = ["EnumSecretErrorCode"]
