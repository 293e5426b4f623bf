# tests/test_store_errors.py
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from product_api import database, main
from product_api.config import ConfigError, Settings
from product_api.core import StoreError
from product_api.database import get_collection
from product_api.main import app

client = TestClient(app)


class BrokenCollection:
    """Every call fails the way an unreachable server does."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")
        return fail


@pytest.fixture
def broken():
    app.dependency_overrides[get_collection] = lambda: BrokenCollection()


@pytest.mark.parametrize("method,path,body", [
    ("get", "/api/products", None),
    ("post", "/api/products", {"name": "A", "price": 1, "stock": 1, "category": "c"}),
    ("get", f"/api/products/{ObjectId()}", None),
    ("put", f"/api/products/{ObjectId()}", {"price": 2}),
    ("delete", f"/api/products/{ObjectId()}", None),
])
def test_store_failures_return_500_with_message(broken, method, path, body):
    kwargs = {"json": body} if body is not None else {}
    r = client.request(method.upper(), path, **kwargs)
    assert r.status_code == 500
    assert "connection refused" in r.json()["message"]


def test_unconnected_store_returns_500(monkeypatch):
    app.dependency_overrides.clear()
    monkeypatch.setattr(database, "_COLLECTION", None)
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"message": "MongoDB is not connected"}


class FakeAdmin:
    def command(self, name):
        raise ServerSelectionTimeoutError("no servers found")


class FakeMongoClient:
    closed = False

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.admin = FakeAdmin()

    def close(self):
        FakeMongoClient.closed = True


def test_connect_failure_raises_store_error(monkeypatch):
    monkeypatch.setattr(database, "_COLLECTION", None)
    monkeypatch.setattr(database, "MongoClient", FakeMongoClient)
    with pytest.raises(StoreError) as exc:
        database.connect(Settings(mongodb_uri="mongodb://nowhere:27017"))
    assert "no servers found" in str(exc.value)
    assert FakeMongoClient.closed
    assert database._COLLECTION is None


def test_connect_uses_database_from_uri(monkeypatch):
    import mongomock

    monkeypatch.setattr(database, "_COLLECTION", None)
    monkeypatch.setattr(database, "_CLIENT", None)
    monkeypatch.setattr(database, "MongoClient", mongomock.MongoClient)
    coll = database.connect(Settings(mongodb_uri="mongodb://localhost:27017/shop", mongodb_collection="items"))
    assert coll.database.name == "shop"
    assert coll.name == "items"
    assert database.get_collection() is coll


def test_run_exits_when_store_unreachable(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://nowhere:27017")
    monkeypatch.setenv("LOG_CONFIG", "does/not/exist.yaml")

    def refuse(settings):
        raise StoreError("MongoDB connection error: refused")

    monkeypatch.setattr(main.database, "connect", refuse)
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: pytest.fail("server started"))
    with pytest.raises(SystemExit) as exc:
        main.run()
    assert exc.value.code == 1


def test_run_exits_without_connection_string(monkeypatch):
    monkeypatch.delenv("MONGODB_URI", raising=False)
    with pytest.raises(SystemExit) as exc:
        main.run()
    assert exc.value.code == 1


def test_settings_from_env_defaults_and_overrides():
    s = Settings.from_env({"MONGODB_URI": "mongodb://db:27017", "PORT": "8080"})
    assert s.port == 8080
    assert s.mongodb_db == "test"
    assert s.mongodb_collection == "products"

    with pytest.raises(ConfigError):
        Settings.from_env({})
    with pytest.raises(ConfigError) as exc:
        Settings.from_env({"MONGODB_URI": "mongodb://db", "PORT": "eighty"})
    assert "PORT" in str(exc.value)


class OverflowingCollection:
    def insert_one(self, doc):
        raise OverflowError("MongoDB can only handle up to 8-byte ints")


def test_unexpected_errors_return_json_500():
    app.dependency_overrides[get_collection] = lambda: OverflowingCollection()
    quiet = TestClient(app, raise_server_exceptions=False)
    r = quiet.post("/api/products", json={"name": "A", "price": 1, "stock": 1, "category": "c"})
    assert r.status_code == 500
    assert r.json() == {"message": "MongoDB can only handle up to 8-byte ints"}


def test_malformed_stored_document_returns_500(collection):
    collection.insert_one({"name": "legacy", "category": "c"})
    r = client.get("/api/products")
    assert r.status_code == 500
    message = r.json()["message"]
    assert "malformed" in message
    assert "price" in message


def test_settings_load_reads_env_file(tmp_path, monkeypatch):
    # setenv first so monkeypatch restores both variables afterwards
    monkeypatch.setenv("MONGODB_URI", "placeholder")
    monkeypatch.delenv("MONGODB_URI")
    monkeypatch.setenv("PORT", "7000")
    env_file = tmp_path / ".env"
    env_file.write_text("MONGODB_URI=mongodb://from-dotenv:27017/shop\nPORT=9000\n")

    s = Settings.load(env_file)
    assert s.mongodb_uri == "mongodb://from-dotenv:27017/shop"
    assert s.port == 7000


def test_lifespan_sets_up_logging_and_connects(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    calls = []
    monkeypatch.setattr(main, "setup_logging", lambda path, level: calls.append(("logging", level)))
    monkeypatch.setattr(main.database, "connect", lambda settings: calls.append(("connect", settings.mongodb_uri)))

    with TestClient(app) as started:
        assert started.get("/health").text == "ok"
    assert calls == [("logging", "INFO"), ("connect", "mongodb://localhost:27017")]
