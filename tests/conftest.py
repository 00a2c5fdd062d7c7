# tests/conftest.py
import pytest
from relay import create_app
from relay.gupshup.client import GupshupClient
from tests.factories import FakeHttp, FakePartner


@pytest.fixture
def partner():
    return FakePartner()


@pytest.fixture
def send_http():
    return FakeHttp()


@pytest.fixture
def app(tmp_path, partner, send_http):
    app = create_app(
        "test",
        overrides={
            "TESTING": True,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'relay.db'}",
            "BASE_URL": "https://relay.example.com",
            "PARTNER_CLIENT": partner,
            "GUPSHUP_CLIENT": GupshupClient("https://gupshup.test/sm/api/v1/msg", http=send_http),
        },
    )
    yield app
    app.config["DB_ENGINE"].dispose()


@pytest.fixture
def engine(app):
    return app.config["DB_ENGINE"]


@pytest.fixture
def client(app):
    return app.test_client()
