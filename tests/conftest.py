"""Shared fixtures."""

from __future__ import annotations

import pytest

from tests.mocks import LogCapture, RelayHarness, make_harness


@pytest.fixture
def logs():
    capture = LogCapture()
    yield capture
    capture.close()


@pytest.fixture
def harness() -> RelayHarness:
    return make_harness()


@pytest.fixture
def unresolved_harness() -> RelayHarness:
    return make_harness(resolved=False)
