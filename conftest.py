"""Shared fixtures: a fixed 'today', an in-memory store and an API client."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.io.models import Run
from app.io.store import MemoryStore
from app.main import app, get_store, get_today

TODAY = date(2024, 5, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def two_runs():
    """1h / 10 km yesterday and 1:30:30 / 20 km two days ago."""
    return [
        Run(id=1, date=date(2024, 5, 14), duration=3600, distance=10.0),
        Run(id=2, date=date(2024, 5, 13), duration=5430, distance=20.0),
    ]


@pytest.fixture
def client(store, today):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: today
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
