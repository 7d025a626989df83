# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shared pytest configuration for the unit test tree.

Every test collected below tests/unit/ gets the `unit` marker, so the fast
suite can be selected on its own:

    pytest -m unit

A module-level pytestmark in a conftest only applies to the conftest itself,
hence the collection hook.
"""

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Add the unit marker to tests under tests/unit that lack it."""
    for item in items:
        if "tests/unit" not in item.path.as_posix():
            continue
        if item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)
