"""
Phalcon Runtime - Test Configuration

Pytest fixtures and configuration for all tests.
"""
from typing import Any, Dict

import pytest
from hypothesis import HealthCheck, settings

from config import reset_config
from core.collection import Collection
from di.container import Container
from di.interfaces import DiInterface

# Cold-cache charmap construction can trip the input-generation speed check.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "property: hypothesis property-based tests")
    config.addinivalue_line("markers", "observability: logging and tracing tests")


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch):
    """Empty the default container slot and re-read configuration for every test."""
    for name in (
        "PHALCON_COLLECTION_INSENSITIVE",
        "PHALCON_JSON_OPTIONS",
        "PHALCON_RANDOM_LENGTH",
        "PHALCON_DI_AUTO_DEFAULT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    DiInterface.reset()
    yield
    DiInterface.reset()
    reset_config()


@pytest.fixture
def sample_data() -> Dict[str, Any]:
    """Mixed-case keyed data used by the collection tests."""
    return {
        "one": "two",
        "Three": "four",
        "five": "six",
    }


@pytest.fixture
def collection(sample_data) -> Collection:
    """Case-insensitive collection seeded with sample data."""
    return Collection(sample_data)


@pytest.fixture
def container() -> Container:
    """Fresh container that does not claim the default slot."""
    return Container(auto_default=False)
