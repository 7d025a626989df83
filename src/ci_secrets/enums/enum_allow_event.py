# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Trigger events a secret may be exposed to.

A secret stores the events it is allowed for as an integer bitmask. The bit
positions are part of the stored format and must not be renumbered; unused
positions are reserved for pull request actions the server does not act on.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntFlag


class EnumAllowEvent(IntFlag):
    """Bit flags for the ``allow_events`` mask of a secret."""

    PUSH_BRANCH = 1 << 0
    PUSH_TAG = 1 << 1
    PULL_OPENED = 1 << 2
    PULL_EDITED = 1 << 3
    PULL_SYNCHRONIZE = 1 << 4
    PULL_REOPENED = 1 << 10
    DEPLOYMENT_CREATED = 1 << 13
    COMMENT_CREATED = 1 << 14
    COMMENT_EDITED = 1 << 15
    SCHEDULE = 1 << 16
    PUSH_DELETE_BRANCH = 1 << 17
    PUSH_DELETE_TAG = 1 << 18

    @classmethod
    def from_legacy_events(cls, events: Iterable[str]) -> EnumAllowEvent:
        """Build a mask from the legacy list of event names.

        Older secrets stored ``events`` as names (``push``, ``pull_request``,
        ...). Unknown names are ignored.

        Args:
            events: Legacy event names.

        Returns:
            The combined flag value (``EnumAllowEvent(0)`` when nothing matched).
        """
        mask = cls(0)
        for event in events:
            mask |= _LEGACY_EVENTS.get(event.strip().lower(), cls(0))
        return mask


_LEGACY_EVENTS: dict[str, EnumAllowEvent] = {
    "push": EnumAllowEvent.PUSH_BRANCH,
    "pull_request": EnumAllowEvent.PULL_OPENED
    | EnumAllowEvent.PULL_SYNCHRONIZE
    | EnumAllowEvent.PULL_REOPENED,
    "tag": EnumAllowEvent.PUSH_TAG,
    "deployment": EnumAllowEvent.DEPLOYMENT_CREATED,
    "comment": EnumAllowEvent.COMMENT_CREATED | EnumAllowEvent.COMMENT_EDITED,
    "schedule": EnumAllowEvent.SCHEDULE,
    "delete": EnumAllowEvent.PUSH_DELETE_BRANCH | EnumAllowEvent.PUSH_DELETE_TAG,
}


__all__ = ["EnumAllowEvent"]
