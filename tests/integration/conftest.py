"""Integration test fixtures -- a real rsync on the local machine."""

from __future__ import annotations

import shutil

import pytest

from ibkp.checks import get_rsync_version
from ibkp.errors import DependencyError


def _rsync_usable() -> bool:
    """Check if an rsync new enough for --link-dest is installed."""
    if shutil.which("rsync") is None:
        return False
    try:
        return get_rsync_version() >= (3, 1, 0)
    except DependencyError:
        return False


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    if _rsync_usable():
        return
    skip = pytest.mark.skip(reason="rsync >= 3.1.0 not available")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
