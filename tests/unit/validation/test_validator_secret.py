# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for secret validation before writes."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from ci_secrets.enums import EnumSecretScope
from ci_secrets.errors import SecretValidationError
from ci_secrets.models import ModelSecret
from ci_secrets.validation import validate_secret


def _secret(**overrides: object) -> ModelSecret:
    fields: dict[str, object] = {
        "type": EnumSecretScope.REPO,
        "org": "foo",
        "repo": "bar",
        "name": "baz",
        "value": SecretStr("s3cr3t"),
    }
    fields.update(overrides)
    return ModelSecret(**fields)


class TestValidateSecret:
    """Test required fields per scope."""

    def test_complete_repo_secret_passes(self) -> None:
        validate_secret(_secret())

    def test_org_secret_with_wildcard_passes(self) -> None:
        validate_secret(_secret(type=EnumSecretScope.ORG, repo="*"))

    def test_shared_secret_needs_team_not_repo(self) -> None:
        validate_secret(_secret(type=EnumSecretScope.SHARED, repo=None, team="ops"))

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"type": None}, "empty secret type provided"),
            ({"org": ""}, "empty secret org provided"),
            ({"repo": None}, "empty secret repo provided"),
            ({"type": EnumSecretScope.ORG, "repo": ""}, "empty secret repo provided"),
            (
                {"type": EnumSecretScope.SHARED, "team": None},
                "empty secret team provided",
            ),
            ({"name": None}, "empty secret name provided"),
            ({"value": SecretStr("")}, "empty secret value provided"),
            ({"value": None}, "empty secret value provided"),
        ],
    )
    def test_missing_field_rejected(
        self, overrides: dict[str, object], message: str
    ) -> None:
        """Test each missing required field raises with a specific message."""
        with pytest.raises(SecretValidationError) as exc_info:
            validate_secret(_secret(**overrides))

        assert str(exc_info.value) == message

    def test_error_never_contains_value(self) -> None:
        with pytest.raises(SecretValidationError) as exc_info:
            validate_secret(_secret(name="", value=SecretStr("topsecret")))

        assert "topsecret" not in str(exc_info.value)
        assert "topsecret" not in repr(exc_info.value.context)
