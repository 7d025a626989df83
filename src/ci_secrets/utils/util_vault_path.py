# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Storage path construction for secrets.

Paths are built per scope::

    org:    <prefix>/org/<org>/<name>
    repo:   <prefix>/repo/<org>/<repo>/<name>
    shared: <prefix>/shared/<org>/<team>/<name>

``<prefix>`` is the mount prefix from ModelVaultHandlerConfig.mount_prefix
(system prefix for the KV version plus the optional administrator prefix).
Components are not validated here; a malformed component produces a path the
backend rejects.
"""

from __future__ import annotations

from typing import assert_never

from ci_secrets.enums import EnumSecretScope


def build_secret_list_path(
    prefix: str, scope: EnumSecretScope, org: str, secondary: str
) -> str:
    """Return the directory path that holds every secret of one owner.

    Args:
        prefix: Mount prefix (e.g. ``secret/data`` or ``secret/data/ci``)
        scope: Secret scope
        org: Owner organization
        secondary: Repository name, team name, or ``*`` for org scope

    Returns:
        Directory path without a trailing slash.
    """
    match scope:
        case EnumSecretScope.ORG:
            return f"{prefix}/{scope.value}/{org}"
        case EnumSecretScope.REPO | EnumSecretScope.SHARED:
            return f"{prefix}/{scope.value}/{org}/{secondary}"
        case _:
            assert_never(scope)


def build_secret_path(
    prefix: str, scope: EnumSecretScope, org: str, secondary: str, name: str
) -> str:
    """Return the storage path of a single secret.

    Example:
        >>> build_secret_path("secret", EnumSecretScope.REPO, "foo", "bar", "baz")
        'secret/repo/foo/bar/baz'
        >>> build_secret_path("secret", EnumSecretScope.ORG, "foo", "*", "baz")
        'secret/org/foo/baz'
    """
    return f"{build_secret_list_path(prefix, scope, org, secondary)}/{name}"


__all__: list[str] = ["build_secret_list_path", "build_secret_path"]
