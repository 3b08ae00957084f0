# tests/conftest.py
from unittest.mock import MagicMock

import pytest

from dupflow.config.schema import DEFAULT_VALIDATION_CONFIG


def wf(wid, name, tags=None):
    """Minimal n8n workflow record as returned by the API."""
    record = {"id": wid, "name": name, "active": True, "nodes": [], "connections": {}}
    if tags is not None:
        record["tags"] = tags
    return record


@pytest.fixture
def config():
    return dict(DEFAULT_VALIDATION_CONFIG)


@pytest.fixture
def mock_logger():
    return MagicMock()
