"""
Shared test fixtures and utilities for the forman-schema test suite.
"""

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def make_resolver():
    """Build an async remote resolver answering from a path -> result mapping.

    Results that are exceptions are raised instead of returned. Unknown paths
    raise LookupError. The returned AsyncMock records every (path, data) call.

    Usage:
        async def test_something(make_resolver):
            resolver = make_resolver({"rpc://options": [{"value": "a"}]})
            ...
            resolver.assert_awaited_once_with("rpc://options", {})
    """

    def factory(responses: dict) -> AsyncMock:
        async def resolve(path, data):
            if path not in responses:
                raise LookupError(f"Unknown path: {path}")
            response = responses[path]
            if isinstance(response, Exception):
                raise response
            return response(data) if callable(response) else response

        return AsyncMock(side_effect=resolve)

    return factory
