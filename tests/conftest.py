import os
import sys
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from zyvero.app.config import Config
from zyvero.app.extensions import db
from zyvero.app.factory import create_app
from zyvero.modules.cart.storage import MemoryStorage
from zyvero.modules.catalog.client import CatalogClient
from zyvero.modules.catalog.routes import CATALOG_EXT


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttpSession:
    """Stands in for requests.Session; answers by URL path."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        path = url.split("://", 1)[-1].split("/", 1)[-1]
        self.calls.append(("/" + path, params))
        hit = self.routes.get("/" + path)
        if hit is None:
            return FakeResponse(404, {"message": "not found"})
        if isinstance(hit, Exception):
            raise hit
        status, payload = hit
        return FakeResponse(status, payload)


def make_product(pid, title, price, rating=4.0, category="beauty", brand="", stock=10):
    return {
        "id": pid,
        "title": title,
        "price": price,
        "rating": rating,
        "stock": stock,
        "category": category,
        "brand": brand,
        "thumbnail": f"https://cdn.test/{pid}.png",
    }


@pytest.fixture()
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        CART_FILE = str(tmp_path / "cart.json")
        STRIPE_SECRET_KEY = "sk_test_123"
        SITE_URL = "http://shop.test"
        CATALOG_API_URL = "https://catalog.test"

    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def memory_storage():
    return MemoryStorage()


@pytest.fixture()
def http(app):
    """Fake catalog HTTP session wired into the app's catalog client."""
    session = FakeHttpSession()
    app.extensions[CATALOG_EXT] = CatalogClient("https://catalog.test", session=session)
    return session
