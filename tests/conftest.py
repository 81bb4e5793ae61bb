# Test configuration

import pytest
import os
import sys

# Make the package importable without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def test_settings():
    """Override settings for testing"""
    from filecat.config.settings import Settings
    return Settings(
        log_json=False,
        max_payload_bytes=64 * 1024,
    )


@pytest.fixture
def people_records():
    """A shallow, uniformly shaped array of records."""
    return [{"id": i, "name": f"Person{i}"} for i in range(100)]


@pytest.fixture
def clear_request_context():
    from filecat.common.logging_config import clear_request_id
    clear_request_id()
    yield
    clear_request_id()
