# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Transport Type Enumeration.

Defines the transport types the secret client talks over.
Used for error context and log enrichment.
"""

from enum import Enum


class EnumInfraTransportType(str, Enum):
    """Transport types used by the secret client.

    Attributes:
        VAULT: HashiCorp Vault HTTP API (KV v1/v2, token and auth endpoints)
        AWS_STS: AWS Security Token Service (identity assertion signing)
        RUNTIME: Client-internal operations (validation, decoding)
    """

    VAULT = "vault"
    AWS_STS = "aws_sts"
    RUNTIME = "runtime"


__all__ = ["EnumInfraTransportType"]
