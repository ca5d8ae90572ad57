"""Shared fixtures: a throwaway SQLite store and an API client."""

import random

import pytest
from fastapi.testclient import TestClient

from fleet_monitor.core.config import Settings
from fleet_monitor.main import create_app
from fleet_monitor.services.db_service import SqlStore


@pytest.fixture
def store(tmp_path):
    """Fresh file-backed SQLite store with the schema created."""
    s = SqlStore.from_url(f"sqlite:///{tmp_path / 'test.db'}")
    s.init_schema()
    yield s
    s.close()


@pytest.fixture
def machine(store):
    machine_id = store.insert_machine({
        "name": "CNC Mill Alpha-1",
        "type": "CNC Mill",
        "location": "Building A - Floor 1",
    })
    return store.get_machine(machine_id)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'api.db'}",
        SEED_ON_STARTUP=True,
        SIMULATE_ON_STARTUP=False,
        SIMULATION_SEED=7,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
