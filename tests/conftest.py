# tests/conftest.py
import pytest

from postal_api import create_app
from postal_api.extensions import db as _db
from postal_api.services import geocode

TEST_GEOCODER_URL = "https://geo.test/api/json"


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "GEOCODER_URL": TEST_GEOCODER_URL,
        "GEOCODER_TIMEOUT": 1,
    })
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


class FakeResponse:
    def __init__(self, payload=None, *, status_code=200, body_error=None):
        self._payload = payload
        self.status_code = status_code
        self._body_error = body_error

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


class GeocoderStub:
    """Stands in for requests.get inside the geocode service."""

    def __init__(self):
        self.calls = []
        self.response = FakeResponse({"response": {"location": []}})
        self.exc = None

    def returns(self, payload, status_code=200):
        self.response = FakeResponse(payload, status_code=status_code)

    def returns_invalid_json(self, status_code=200):
        self.response = FakeResponse(
            status_code=status_code,
            body_error=ValueError("Expecting value: line 1 column 1 (char 0)"),
        )

    def raises(self, exc):
        self.exc = exc

    def __call__(self, url, timeout=None, **kwargs):
        self.calls.append({"url": url, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture()
def geocoder_stub(monkeypatch):
    stub = GeocoderStub()
    monkeypatch.setattr(geocode.requests, "get", stub)
    return stub


def make_location(prefecture, city, town, x="139.7673068", y="35.6809591", postal="1000001"):
    return {
        "city": city,
        "town": town,
        "x": x,
        "y": y,
        "prefecture": prefecture,
        "postal": postal,
    }
