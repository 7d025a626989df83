"""Credential lifecycle state enumeration for the token service."""

from enum import Enum


class EnumCredentialState(str, Enum):
    """States of the Vault token service."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED = "AUTHENTICATED"
