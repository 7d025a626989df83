# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Conversion between ModelSecret and the backend's untyped key/value map.

Encoding writes only fields that carry a value: empty strings, empty lists,
zero integers and None are left out, so a partial secret never clobbers
stored fields with zero values. Booleans are written whenever they are set,
including False.

Decoding is schema tolerant. Each known key is extracted on its own; a value
of the wrong type is skipped instead of failing the whole decode, and unknown
keys are ignored. Integers may arrive as int, integral float, or numeric
string depending on which client wrote them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pydantic import SecretStr

from ci_secrets.enums import EnumAllowEvent, EnumSecretScope
from ci_secrets.models.model_secret import ModelSecret

logger = logging.getLogger(__name__)

KEY_TYPE = "type"
KEY_ORG = "org"
KEY_REPO = "repo"
KEY_TEAM = "team"
KEY_NAME = "name"
KEY_VALUE = "value"
KEY_IMAGES = "images"
KEY_ALLOW_EVENTS = "allow_events"
KEY_LEGACY_EVENTS = "events"
KEY_ALLOW_COMMAND = "allow_command"
KEY_ALLOW_SUBSTITUTION = "allow_substitution"
KEY_REPO_ALLOWLIST = "repo_allowlist"
KEY_CREATED_AT = "created_at"
KEY_CREATED_BY = "created_by"
KEY_UPDATED_AT = "updated_at"
KEY_UPDATED_BY = "updated_by"

_STRING_FIELDS: tuple[str, ...] = (
    KEY_ORG,
    KEY_REPO,
    KEY_TEAM,
    KEY_NAME,
    KEY_CREATED_BY,
    KEY_UPDATED_BY,
)
_INT_FIELDS: tuple[str, ...] = (KEY_ALLOW_EVENTS, KEY_CREATED_AT, KEY_UPDATED_AT)
_BOOL_FIELDS: tuple[str, ...] = (KEY_ALLOW_COMMAND, KEY_ALLOW_SUBSTITUTION)
_LIST_FIELDS: tuple[str, ...] = (KEY_IMAGES, KEY_REPO_ALLOWLIST)


def secret_to_envelope(secret: ModelSecret) -> dict[str, object]:
    """Encode a secret into the map written to the backend.

    Args:
        secret: Domain secret, possibly partial

    Returns:
        Map holding only the fields that are set and non-empty.
    """
    envelope: dict[str, object] = {}

    if secret.type is not None:
        envelope[KEY_TYPE] = secret.type.value

    for key in _STRING_FIELDS:
        text = getattr(secret, key)
        if text:
            envelope[key] = text

    value = secret.get_value()
    if value:
        envelope[KEY_VALUE] = value

    for key in _LIST_FIELDS:
        items = getattr(secret, key)
        if items:
            envelope[key] = list(items)

    for key in _INT_FIELDS:
        number = getattr(secret, key)
        if number:
            envelope[key] = int(number)

    for key in _BOOL_FIELDS:
        flag = getattr(secret, key)
        if flag is not None:
            envelope[key] = flag

    return envelope


def secret_from_envelope(envelope: Mapping[str, object]) -> ModelSecret:
    """Decode the backend map into a secret.

    Args:
        envelope: Secret fields as stored (already unwrapped from any KV v2
            ``data`` nesting)

    Returns:
        ModelSecret with every recognised, well-typed field set. Missing or
        mistyped fields stay None.
    """
    fields: dict[str, object] = {}

    scope = _as_scope(envelope.get(KEY_TYPE))
    if scope is not None:
        fields[KEY_TYPE] = scope

    for key in _STRING_FIELDS:
        text = _as_str(envelope.get(key))
        if text is not None:
            fields[key] = text

    value = _as_str(envelope.get(KEY_VALUE))
    if value is not None:
        fields[KEY_VALUE] = SecretStr(value)

    for key in _LIST_FIELDS:
        items = _as_str_list(envelope.get(key))
        if items is not None:
            fields[key] = items

    for key in _INT_FIELDS:
        number = _as_int(envelope.get(key))
        if number is not None and number >= 0:
            fields[key] = number

    if KEY_ALLOW_EVENTS not in fields:
        legacy = _as_str_list(envelope.get(KEY_LEGACY_EVENTS))
        if legacy:
            mask = EnumAllowEvent.from_legacy_events(legacy)
            if mask:
                fields[KEY_ALLOW_EVENTS] = int(mask)

    for key in _BOOL_FIELDS:
        flag = envelope.get(key)
        if isinstance(flag, bool):
            fields[key] = flag

    known = (KEY_TYPE, KEY_VALUE, *_STRING_FIELDS, *_LIST_FIELDS, *_INT_FIELDS)
    skipped = [
        key
        for key in (*known, *_BOOL_FIELDS)
        if key in envelope and key not in fields
    ]
    if skipped:
        logger.debug(
            "Skipped mistyped secret fields while decoding",
            extra={"skipped_fields": skipped},
        )

    return ModelSecret(**fields)


def _as_str(raw: object) -> str | None:
    return raw if isinstance(raw, str) else None


def _as_scope(raw: object) -> EnumSecretScope | None:
    if not isinstance(raw, str):
        return None
    try:
        return EnumSecretScope(raw.lower())
    except ValueError:
        return None


def _as_str_list(raw: object) -> list[str] | None:
    # Elements of the wrong type are dropped, the rest of the list is kept.
    if not isinstance(raw, list | tuple):
        return None
    return [item for item in raw if isinstance(item, str)]


def _as_int(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


__all__: list[str] = ["secret_from_envelope", "secret_to_envelope"]
