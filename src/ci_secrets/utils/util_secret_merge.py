# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Selective merge used by secret updates."""

from __future__ import annotations

from ci_secrets.models.model_secret import ModelSecret


def merge_secret_update(current: ModelSecret, incoming: ModelSecret) -> ModelSecret:
    """Overlay the fields explicitly set on incoming onto current.

    Overlaid only when set:
        - allow_events: non-zero
        - images, repo_allowlist: not None (an empty list clears them)
        - value: non-empty
        - allow_command, allow_substitution: not None
        - updated_at, updated_by: non-zero / non-empty

    Identity fields (type, org, repo, team, name) and the created_* audit
    fields always come from current.

    Args:
        current: Secret as stored in the backend
        incoming: Partial secret from the caller

    Returns:
        New ModelSecret; neither argument is modified.
    """
    update: dict[str, object] = {}

    if incoming.allow_events:
        update["allow_events"] = incoming.allow_events
    if incoming.images is not None:
        update["images"] = list(incoming.images)
    if incoming.get_value():
        update["value"] = incoming.value
    if incoming.allow_command is not None:
        update["allow_command"] = incoming.allow_command
    if incoming.allow_substitution is not None:
        update["allow_substitution"] = incoming.allow_substitution
    if incoming.repo_allowlist is not None:
        update["repo_allowlist"] = list(incoming.repo_allowlist)
    if incoming.updated_at:
        update["updated_at"] = incoming.updated_at
    if incoming.updated_by:
        update["updated_by"] = incoming.updated_by

    return current.model_copy(update=update)


__all__: list[str] = ["merge_secret_update"]
