import random

import pytest

from fastball_sim.config import TuningConfig
from utils.session_store import MemoryStore


def pytest_sessionstart(session):
    """Ensure a non-deterministic RNG for tests depending on randomness."""
    random.seed()


@pytest.fixture
def tuning():
    return TuningConfig()


@pytest.fixture
def store():
    return MemoryStore()
