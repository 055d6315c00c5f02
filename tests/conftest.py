"""
Global pytest configuration and fixtures for Faux Packet.

Every test gets a fresh store; ids are random UUIDs, so assertions compare
against ids returned by the store rather than fixed values.
"""

import random
from typing import AsyncGenerator, Generator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

# Set deterministic seeds BEFORE any other imports that might use random
RANDOM_SEED = 42
random.seed(RANDOM_SEED)
Faker.seed(RANDOM_SEED)

from faux_packet.api.app import create_app
from faux_packet.models.catalog import Facility, Plan
from faux_packet.models.device import Device
from faux_packet.models.volume import Volume, VolumeCreate
from faux_packet.services.store import MemoryStore


PROJECT_ID = "93125c2a-8b78-4d4f-a3c4-7367d6b7cca8"


# =============================================================================
# Session-Scoped Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def faker() -> Faker:
    """Seeded Faker instance for deterministic fake data."""
    fake = Faker()
    Faker.seed(RANDOM_SEED)
    return fake


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def project_id() -> str:
    """Project all factory-made devices and volumes belong to."""
    return PROJECT_ID


@pytest.fixture
def store() -> MemoryStore:
    """A fresh, empty store."""
    return MemoryStore()


@pytest.fixture
def make_facility(store: MemoryStore):
    """Factory for facilities with unique codes."""
    counter = 0

    def _make(name: str | None = None, code: str | None = None) -> Facility:
        nonlocal counter
        counter += 1
        return store.create_facility(
            name or f"Test Facility {counter}",
            code or f"tst{counter}",
        )

    return _make


@pytest.fixture
def make_plan(store: MemoryStore):
    """Factory for plans with unique slugs."""
    counter = 0

    def _make(slug: str | None = None, name: str | None = None) -> Plan:
        nonlocal counter
        counter += 1
        return store.create_plan(slug or f"baremetal_{counter}", name or f"Plan {counter}")

    return _make


@pytest.fixture
def make_device(store: MemoryStore, make_facility, project_id: str, faker: Faker):
    """Factory for devices; creates a facility when none is given."""

    def _make(
        hostname: str | None = None,
        facility: Facility | None = None,
        plan: Plan | None = None,
        project: str | None = None,
    ) -> Device:
        facility = facility or make_facility()
        return store.create_device(
            project or project_id,
            hostname or faker.hostname(0),
            facility.id,
            plan.id if plan else None,
        )

    return _make


@pytest.fixture
def make_volume(store: MemoryStore, project_id: str):
    """Factory for volumes."""

    def _make(size: int = 10, description: str = "", project: str | None = None) -> Volume:
        return store.create_volume(
            project or project_id,
            VolumeCreate(size=size, description=description),
        )

    return _make


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def app(store: MemoryStore):
    """FastAPI application serving the test store, without a metadata device."""
    return create_app(store=store)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Synchronous client running the app lifespan."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for API testing.

    Uses ASGI transport to test without network calls.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# BDD Step Fixtures
# =============================================================================


@pytest.fixture
def context():
    """
    Shared context dictionary for BDD scenarios.

    Allows steps to share state without global variables.
    """
    return {}


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_random_seed():
    """Reset random seed before each test for determinism."""
    random.seed(RANDOM_SEED)
    Faker.seed(RANDOM_SEED)
    yield


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep FPK_ environment variables from leaking into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("FPK_"):
            monkeypatch.delenv(key)
    yield


# =============================================================================
# Markers Registration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated unit tests")
    config.addinivalue_line("markers", "integration: Tests going through the HTTP API")
    config.addinivalue_line("markers", "critical: Must pass for deployment")
