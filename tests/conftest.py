"""Shared fixtures."""

import pytest

from reflectpool.registry import Registry


@pytest.fixture
def registry():
    """A fresh registry, isolated from the process-wide default."""
    return Registry()
