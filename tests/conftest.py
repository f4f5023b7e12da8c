"""
Test fixtures - fresh in-memory product store + HTTP clients bound to the app
"""
import pytest
from fastapi.testclient import TestClient

from inventory.database import MemoryProductStore
from inventory.main import app, get_store
from invclient.client import InventoryClient


@pytest.fixture()
def store():
    return MemoryProductStore()


@pytest.fixture()
def client(store):
    """TestClient with the store dependency pointed at the fixture store"""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def api(client):
    """SDK client that talks to the app through the TestClient"""
    return InventoryClient(base_url="http://testserver", session=client)
