import pytest

from ioio.app import create_app
from ioio.config import ApiConfig, StoreConfig
from ioio.errors import StoreError


@pytest.fixture
def api_config(tmp_path):
    return ApiConfig(store=StoreConfig(database_url=f"sqlite:///{tmp_path / 'ioio.db'}"))


@pytest.fixture
def app(api_config):
    app = create_app(api_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class FailingStore:
    def __init__(self, error="connection refused"):
        self.error = error
        self.calls = 0

    def insert(self, kind, record):
        self.calls += 1
        raise StoreError(self.error)

    def list(self, kind):
        self.calls += 1
        raise StoreError(self.error)

    def delete(self, kind, record_id):
        self.calls += 1
        raise StoreError(self.error)


class ExplodingStore:
    def insert(self, kind, record):
        raise RuntimeError("boom")

    def list(self, kind):
        raise RuntimeError("boom")

    def delete(self, kind, record_id):
        raise RuntimeError("boom")


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def failing_client(api_config, failing_store):
    app = create_app(api_config, store=failing_store)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def exploding_client(api_config):
    app = create_app(api_config, store=ExplodingStore())
    app.config["TESTING"] = True
    return app.test_client()


def property_payload(**overrides):
    payload = {
        "name": "A",
        "age": "30",
        "email": "a@x.com",
        "phone": "555",
        "property_type": "house",
        "message": "hi",
    }
    payload.update(overrides)
    return payload


def service_payload(**overrides):
    payload = {
        "name": "B",
        "age": "41",
        "email": "b@x.com",
        "phone": "777",
        "service_type": "beauty",
        "message": "hello",
    }
    payload.update(overrides)
    return payload
