"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.recall import EbisuModel


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Multi-step review scenarios")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def balanced_model():
    """Model evaluated exactly at its half-life of 2 time units."""
    return EbisuModel(time=2.0, alpha=2.0, beta=2.0)


@pytest.fixture
def daily_model():
    """Typical prior for a new fact: half-life guess of 24 hours."""
    return EbisuModel(time=24.0, alpha=3.0, beta=3.0)


@pytest.fixture
def eps():
    """Two units in the last place of 1.0."""
    import math

    return 2.0 * math.ulp(1.0)
