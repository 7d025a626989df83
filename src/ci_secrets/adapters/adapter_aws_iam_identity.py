# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""AWS IAM identity assertion for the Vault AWS auth method.

Builds a SigV4 signed ``sts:GetCallerIdentity`` request with the process's
AWS credentials and packages method, URL, headers and body for
``auth/aws/login``. Vault replays the request against STS to learn who the
caller is; the request itself is never sent from here.

See https://developer.hashicorp.com/vault/docs/auth/aws#iam-auth-method
"""

from __future__ import annotations

import base64
import json
import logging
from uuid import UUID

import boto3
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError, ClientError

from ci_secrets.enums import EnumInfraTransportType
from ci_secrets.errors import InfraAuthenticationError, ModelInfraErrorContext
from ci_secrets.models import ModelAwsIamLoginPayload

logger = logging.getLogger(__name__)

STS_REQUEST_URL: str = "https://sts.amazonaws.com/"
STS_REQUEST_METHOD: str = "POST"
STS_REQUEST_BODY: str = "Action=GetCallerIdentity&Version=2011-06-15"
STS_CONTENT_TYPE: str = "application/x-www-form-urlencoded; charset=utf-8"
STS_SERVICE_NAME: str = "sts"


def _b64(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


class AdapterAwsIamIdentity:
    """Signs identity assertions with credentials from a boto3 session.

    Credentials are resolved on every call, so rotated instance or role
    credentials are picked up by the next handshake.
    """

    def __init__(
        self,
        role: str,
        region: str = "us-east-1",
        session: boto3.Session | None = None,
    ) -> None:
        self._role = role
        self._region = region
        self._session = session

    def _get_session(self) -> boto3.Session:
        if self._session is None:
            self._session = boto3.Session()
        return self._session

    def _error_context(self, correlation_id: UUID | None) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.AWS_STS,
            operation="sign_identity_request",
            target_name=STS_REQUEST_URL,
            correlation_id=correlation_id,
        )

    def build_login_payload(
        self, correlation_id: UUID | None = None
    ) -> ModelAwsIamLoginPayload:
        """Sign a GetCallerIdentity request and package it for Vault.

        Args:
            correlation_id: Correlation ID for tracing

        Returns:
            Login payload with base64 encoded URL, headers and body.

        Raises:
            InfraAuthenticationError: No AWS credentials, or signing failed.
        """
        try:
            credentials = self._get_session().get_credentials()
            if credentials is None:
                raise InfraAuthenticationError(
                    "No AWS credentials available to sign the identity request",
                    context=self._error_context(correlation_id),
                )
            frozen = credentials.get_frozen_credentials()

            request = AWSRequest(
                method=STS_REQUEST_METHOD,
                url=STS_REQUEST_URL,
                data=STS_REQUEST_BODY,
                headers={"Content-Type": STS_CONTENT_TYPE},
            )
            SigV4Auth(frozen, STS_SERVICE_NAME, self._region).add_auth(request)
        except (BotoCoreError, ClientError) as e:
            raise InfraAuthenticationError(
                f"Failed to sign AWS identity request: {type(e).__name__}",
                context=self._error_context(correlation_id),
            ) from e

        # Vault expects the Go http.Header layout: header name -> list of values.
        headers = {name: [value] for name, value in request.headers.items()}

        logger.debug(
            "Signed AWS identity request",
            extra={
                "region": self._region,
                "signed_headers": sorted(headers),
                "correlation_id": str(correlation_id),
            },
        )

        return ModelAwsIamLoginPayload(
            role=self._role,
            iam_http_request_method=request.method,
            iam_request_url=_b64(request.url),
            iam_request_headers=_b64(json.dumps(headers)),
            iam_request_body=_b64(STS_REQUEST_BODY),
        )


__all__: list[str] = [
    "AdapterAwsIamIdentity",
    "STS_REQUEST_BODY",
    "STS_REQUEST_URL",
]
