"""
Shared fixtures.

Async tests run on the anyio pytest plugin, asyncio backend only (trio is
not a dependency).
"""

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"
