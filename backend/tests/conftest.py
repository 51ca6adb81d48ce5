"""
Pytest configuration and fixtures.

- FastAPI test client whose store dependency points at an in-memory fake
- Service fixtures sharing the same fake store
- Environment overrides so nothing reaches a real Neo4j instance
"""
import os

os.environ.setdefault("NEO4J_URI", "bolt://localhost:7687")
os.environ.setdefault("NEO4J_USER", "neo4j")
os.environ.setdefault("NEO4J_PASSWORD", "test-password")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from fastapi.testclient import TestClient

from kgms.dependencies import get_store
from kgms.main import app
from kgms.services.edge_service import EdgeService
from kgms.services.node_service import NodeService
from tests.fakes import FakeGraphStore


@pytest.fixture
def store():
    return FakeGraphStore()


@pytest.fixture
def node_service(store):
    return NodeService(store)


@pytest.fixture
def edge_service(store):
    return EdgeService(store)


@pytest.fixture
def client(store):
    """
    TestClient without the context manager, so the startup hook (which
    connects to Neo4j) never runs. Server exceptions are turned into
    responses by the app's handlers, as in production.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def people(node_service, edge_service):
    """Alice -KNOWS-> Bob, returned as (alice, bob, edge)."""
    alice = node_service.create({"name": "A"}, ["Person"])
    bob = node_service.create({"name": "B"}, ["Person"])
    edge = edge_service.create(alice.id, bob.id, "KNOWS", {"since": 2020})
    return alice, bob, edge
