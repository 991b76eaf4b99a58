"""
Global pytest configuration and fixtures for the FreshDesk client tests.

Shared fixtures live in tests/fixtures and are imported here so they are
available to every test module without explicit import.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest  # type: ignore
from faker import Faker  # type: ignore

# Add the project root to Python path
project_root: Path = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.freshdesk_fixtures import (  # noqa: E402,F401
    data_source,
    fake_freshdesk,
    freshdesk_client,
    freshdesk_sync,
)

fake: Faker = Faker()


@pytest.fixture(scope="session")
def faker_instance() -> Faker:
    """Provide a Faker instance for generating test data."""
    return fake


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """
    Restore environment variables after each test.
    Configuration tests set FRESHDESK_* variables.
    """
    original_env: Dict[str, str] = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


def pytest_collection_modifyitems(config, items):
    """Auto-mark rate limiter tests as slow."""
    for item in items:
        if "rate_limit" in item.nodeid.lower():
            item.add_marker(pytest.mark.slow)
