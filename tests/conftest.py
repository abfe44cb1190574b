"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from gapforge.config import EngineConfig  # noqa: E402
from gapforge.engine import (  # noqa: E402
    Difficulty,
    GapEngine,
    GapSettings,
    HistoryStore,
    NodeTypeSwitches,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


SAMPLE_SOURCE = """\
async function loadUsers(api, limit) {
  const response = await api.fetchUsers(limit);
  const active = response.items.filter(u => u.isActive);
  if (active.length > 0) {
    return active.map(formatUser);
  }
  return [];
}

function formatUser(user) {
  return { name: user.displayName, admin: user.role === "admin" };
}
"""


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def sample_source():
    """A small multi-line JavaScript module with every gap category in it."""
    return SAMPLE_SOURCE


@pytest.fixture
def rng():
    """Seeded random source so selection is reproducible."""
    return random.Random(1234)


@pytest.fixture
def engine():
    """Engine with default tuning and its own empty history."""
    return GapEngine(EngineConfig(), HistoryStore())


@pytest.fixture
def custom_settings():
    """Factory for ``custom`` difficulty settings with only the named switches on."""

    def make(**overrides):
        switches = {"properties": False, "functions": False}
        node_overrides = {
            key: overrides.pop(key)
            for key in list(overrides)
            if key in NodeTypeSwitches.model_fields
        }
        switches.update(node_overrides)
        return GapSettings(
            difficulty=Difficulty.CUSTOM,
            node_types=NodeTypeSwitches(**switches),
            **overrides,
        )

    return make
