"""Shared fixtures for household bills tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from household_bills.utils import dt_utils
from tests.helpers import FakeBillStore


@pytest.fixture
def store() -> FakeBillStore:
    """Empty in-memory store."""
    return FakeBillStore()


@pytest.fixture
def restore_default_timezone() -> Iterator[None]:
    """Restore the module default timezone after a test changes it."""
    original = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(original)
