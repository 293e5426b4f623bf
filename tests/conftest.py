# tests/conftest.py
import mongomock
import pytest

from product_api.database import get_collection
from product_api.main import app


@pytest.fixture(autouse=True)
def collection():
    # fresh in-memory collection per test, injected in place of the real connection
    coll = mongomock.MongoClient().db.products
    app.dependency_overrides[get_collection] = lambda: coll
    yield coll
    app.dependency_overrides.clear()
