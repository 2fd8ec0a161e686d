"""
Pytest configuration and fixtures

The import engine is pure, so nothing here touches a database or the network.
Every test that depends on the fallback instant pins it with ``fixed_now_ms``.
"""
import json
import os
import sys

import pytest

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


FIXED_NOW_MS = 1771330000000  # 2026-02-17T12:06:40Z


@pytest.fixture
def fixed_now_ms():
    return FIXED_NOW_MS


@pytest.fixture
def dump():
    """Serialize a python structure the way a phone export would arrive."""
    return lambda payload: json.dumps(payload)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as test_client:
        yield test_client
