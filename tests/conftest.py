import pytest
from fastapi.testclient import TestClient

from qrlogin.db import DocumentStore, LOGINS, PARTNERS
from qrlogin.main import create_app
from qrlogin.services.challenge_service import ChallengeIssuer
from qrlogin.services.confirmation_watcher import ConfirmationWatcher

PARTNER_KEY = "partner-42"
FAKE_QR = "data:image/png;base64,ZmFrZQ=="


@pytest.fixture
def store():
    """Fresh store with a single partner record."""
    s = DocumentStore()
    s.collection(PARTNERS).add({"apiKey": PARTNER_KEY, "name": "Partner 42"})
    return s


@pytest.fixture
def logins(store):
    return store.collection(LOGINS)


@pytest.fixture
def issuer(store):
    # Real tokens, stubbed rendering keeps unit tests fast
    return ChallengeIssuer(store, render=lambda token: FAKE_QR)


@pytest.fixture
def watcher():
    return ConfirmationWatcher()


@pytest.fixture
def app(store):
    return create_app(store=store, janitor_enabled=False)


@pytest.fixture
def client(app):
    return TestClient(app)
