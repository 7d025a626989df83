# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Request body for the Vault AWS IAM login endpoint.

See https://developer.hashicorp.com/vault/api-docs/auth/aws#login for the
field semantics. URL, headers and body are base64 encoded; role and method
are sent as-is.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelAwsIamLoginPayload(BaseModel):
    """Signed STS GetCallerIdentity request, packaged for Vault.

    Attributes:
        role: Vault role to log in with
        iam_http_request_method: HTTP method of the signed request
        iam_request_url: Base64 encoded request URL
        iam_request_headers: Base64 encoded JSON object of signed headers
        iam_request_body: Base64 encoded request body
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    role: str = Field(min_length=1)
    iam_http_request_method: str
    iam_request_url: str
    iam_request_headers: str
    iam_request_body: str

    def to_request_body(self) -> dict[str, str]:
        """Return the JSON body posted to ``auth/<mount>/login``."""
        return self.model_dump()


__all__: list[str] = ["ModelAwsIamLoginPayload"]
