# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
# mypy: disable-error-code="arg-type"
"""Unit tests for the secret/envelope codec."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from ci_secrets.enums import EnumAllowEvent, EnumSecretScope
from ci_secrets.models import ModelSecret
from ci_secrets.utils import secret_from_envelope, secret_to_envelope


class TestSecretToEnvelope:
    """Test encoding a secret into the stored map."""

    def test_encodes_all_set_fields(self, repo_secret: ModelSecret) -> None:
        """Test a complete secret encodes every field."""
        envelope = secret_to_envelope(repo_secret)

        assert envelope == {
            "type": "repo",
            "org": "octocat",
            "repo": "hello-world",
            "name": "db_password",
            "value": "hunter2",
            "images": ["alpine:latest"],
            "allow_events": 3,
            "allow_command": True,
            "allow_substitution": False,
            "created_at": 1700000000,
            "created_by": "octocat",
            "updated_at": 1700000000,
            "updated_by": "octocat",
        }

    def test_omits_empty_and_zero_values(self) -> None:
        """Test empty strings, empty lists, zero and None are not written."""
        secret = ModelSecret(
            type=EnumSecretScope.ORG,
            org="foo",
            repo="*",
            name="baz",
            value=SecretStr(""),
            images=[],
            allow_events=0,
            created_at=0,
            created_by="",
        )

        envelope = secret_to_envelope(secret)

        assert envelope == {"type": "org", "org": "foo", "repo": "*", "name": "baz"}

    def test_writes_false_booleans(self) -> None:
        """Test booleans set to False are still written."""
        envelope = secret_to_envelope(
            ModelSecret(allow_command=False, allow_substitution=False)
        )
        assert envelope == {"allow_command": False, "allow_substitution": False}

    def test_shared_secret_writes_team(self) -> None:
        secret = ModelSecret(type=EnumSecretScope.SHARED, org="foo", team="ops")
        assert secret_to_envelope(secret) == {
            "type": "shared",
            "org": "foo",
            "team": "ops",
        }


class TestSecretFromEnvelope:
    """Test tolerant decoding of stored maps."""

    def test_round_trip(self, repo_secret: ModelSecret) -> None:
        """Test decode(encode(s)) reproduces every set field."""
        decoded = secret_from_envelope(secret_to_envelope(repo_secret))

        assert decoded.model_dump() == repo_secret.model_dump()
        assert decoded.get_value() == "hunter2"

    def test_missing_keys_stay_unset(self) -> None:
        """Test absent keys decode to None."""
        decoded = secret_from_envelope({"name": "baz"})

        assert decoded.name == "baz"
        assert decoded.type is None
        assert decoded.value is None
        assert decoded.images is None
        assert decoded.allow_command is None

    def test_unknown_keys_are_ignored(self) -> None:
        decoded = secret_from_envelope({"name": "baz", "color": "blue", "n": 1})
        assert decoded == ModelSecret(name="baz")

    def test_mistyped_fields_are_skipped(self) -> None:
        """Test one bad field does not fail the whole decode."""
        decoded = secret_from_envelope(
            {
                "name": "baz",
                "org": 42,
                "value": ["not", "a", "string"],
                "images": "alpine",
                "allow_command": "yes",
                "created_at": "yesterday",
            }
        )

        assert decoded.name == "baz"
        assert decoded.org is None
        assert decoded.value is None
        assert decoded.images is None
        assert decoded.allow_command is None
        assert decoded.created_at is None

    @pytest.mark.parametrize("raw", [1700000000, 1700000000.0, "1700000000"])
    def test_integers_from_any_client(self, raw: object) -> None:
        """Test int, integral float and numeric string all decode."""
        decoded = secret_from_envelope({"created_at": raw, "allow_events": raw})
        assert decoded.created_at == 1700000000
        assert decoded.allow_events == 1700000000

    @pytest.mark.parametrize("raw", [1.5, True, "12abc", None])
    def test_non_integral_values_rejected(self, raw: object) -> None:
        decoded = secret_from_envelope({"updated_at": raw})
        assert decoded.updated_at is None

    def test_negative_integers_rejected(self) -> None:
        decoded = secret_from_envelope({"allow_events": -1})
        assert decoded.allow_events is None

    def test_list_keeps_string_elements_only(self) -> None:
        decoded = secret_from_envelope({"images": ["alpine", 3, None, "golang"]})
        assert decoded.images == ["alpine", "golang"]

    def test_scope_is_case_insensitive(self) -> None:
        assert secret_from_envelope({"type": "Shared"}).type is EnumSecretScope.SHARED

    def test_unknown_scope_left_unset(self) -> None:
        assert secret_from_envelope({"type": "global"}).type is None

    def test_legacy_events_fallback(self) -> None:
        """Test secrets stored with legacy event names get a bitmask."""
        decoded = secret_from_envelope({"events": ["push", "tag"]})

        assert decoded.events == EnumAllowEvent.PUSH_BRANCH | EnumAllowEvent.PUSH_TAG

    def test_allow_events_wins_over_legacy_events(self) -> None:
        decoded = secret_from_envelope(
            {"allow_events": int(EnumAllowEvent.SCHEDULE), "events": ["push"]}
        )
        assert decoded.events == EnumAllowEvent.SCHEDULE
