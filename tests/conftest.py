from __future__ import annotations

import mongomock
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services import store as store_module
from app.services.store import MemoryOpportunityStore, MongoOpportunityStore, use_store


@pytest.fixture
def memory_store(monkeypatch: pytest.MonkeyPatch) -> MemoryOpportunityStore:
    monkeypatch.setattr(store_module, "_provider", None)
    store = MemoryOpportunityStore(seed=False)
    use_store(store)
    return store


@pytest.fixture
def mongo_store(monkeypatch: pytest.MonkeyPatch) -> MongoOpportunityStore:
    monkeypatch.setattr(store_module, "_provider", None)
    store = MongoOpportunityStore(mongomock.MongoClient()["internhub_test"])
    use_store(store)
    return store


@pytest.fixture
def client(memory_store: MemoryOpportunityStore):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mongo_client(mongo_store: MongoOpportunityStore):
    with TestClient(app) as test_client:
        yield test_client
