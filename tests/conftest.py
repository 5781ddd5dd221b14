"""Root conftest — shared pytest markers and global settings.

Markers
-------
unit        fast, no I/O, fake provider only
slow        uses the real psutil provider and real cadence (> 2 s)

Set RESMON_SKIP_SLOW=1 to skip every ``slow`` test.
"""

from __future__ import annotations

import os

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, no I/O tests")
    config.addinivalue_line("markers", "slow: test is expected to take > 2 s")


def pytest_collection_modifyitems(config, items):
    if not os.getenv("RESMON_SKIP_SLOW"):
        return
    skip_slow = pytest.mark.skip(reason="RESMON_SKIP_SLOW is set")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
