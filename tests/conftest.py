import pytest
from types import SimpleNamespace
from typing import Any, Dict, Generator, List
from fastapi.testclient import TestClient

from checkout_api.app_setup.factory import create_app
from checkout_api.config import Settings

SITE = "https://shop.example.com"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class FakeCheckoutClient:
    """Double du client Stripe: enregistre les appels, renvoie des objets façon StripeObject."""

    def __init__(self):
        self.created: List[Dict[str, Any]] = []
        self.retrieved: List[str] = []
        self.listed: List[str] = []
        self.sessions: Dict[str, Any] = {}
        self.line_items: Dict[str, List[Any]] = {}
        self.error: Exception | None = None

    @property
    def calls(self) -> int:
        return len(self.created) + len(self.retrieved) + len(self.listed)

    def create_session(self, params):
        self.created.append(params)
        if self.error:
            raise self.error
        sid = f"cs_test_{len(self.created)}"
        return SimpleNamespace(id=sid, url=f"https://checkout.stripe.com/c/pay/{sid}")

    def retrieve_session(self, session_id):
        self.retrieved.append(session_id)
        if self.error:
            raise self.error
        return self.sessions[session_id]

    def list_line_items(self, session_id):
        self.listed.append(session_id)
        return self.line_items.get(session_id, [])


@pytest.fixture
def settings() -> Settings:
    return Settings(
        provider_secret_key="sk_test_dummy",
        site_base_url=SITE,
        allowed_origin=SITE,
        site_name="shop.example.com",
        deployment_env="test",
    )

@pytest.fixture
def fake_checkout() -> FakeCheckoutClient:
    return FakeCheckoutClient()

@pytest.fixture
def app(settings, fake_checkout):
    return create_app(settings=settings, checkout_client=fake_checkout)

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
