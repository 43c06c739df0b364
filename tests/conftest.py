import os
import threading
from decimal import Decimal
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Désactive l'init fastapi-limiter (évite toute connexion Redis pendant les tests)
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront.app_setup.factory import create_app
from storefront.config import Settings
from storefront.errors import DeliveryError
from storefront.ledger.repository import TransactionLedger
from storefront.notifications.mailer import DeliveryReceipt

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)
        elif "/tests/functional/" in nodeid or nodeid.startswith("tests/functional/"):
            item.add_marker(pytest.mark.functional)


class FakeMailer:
    """Mailer en mémoire: enregistre les envois, peut échouer sur un destinataire ou un sujet."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail_for: Optional[str] = None
        self._lock = threading.Lock()

    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt:
        if self.fail_for and (self.fail_for == recipient or self.fail_for in subject):
            raise DeliveryError(f"Mail transport failure: refused {recipient}")
        with self._lock:
            self.sent.append({"recipient": recipient, "subject": subject, "body": body})
            n = len(self.sent)
        return DeliveryReceipt(recipient=recipient, subject=subject, message_id=f"<fake-{n}@test>")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        email_user="shop@example.com",
        email_pass="secret",
        admin_email="admin@example.com",
        paystack_secret_key="sk_test_123",
        paystack_base_url="https://api.paystack.test",
        gateway_currency="ZAR",
        shipping_fee=Decimal("120"),
        ledger_path=tmp_path / "transactions.jsonl",
        outbound_timeout=2.0,
    )

@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()

@pytest.fixture
def ledger(settings) -> TransactionLedger:
    return TransactionLedger(settings.ledger_path)

@pytest.fixture
def gateway() -> MagicMock:
    return MagicMock()

@pytest.fixture
def app(settings, mailer, ledger, gateway):
    return create_app(settings, mailer=mailer, ledger=ledger, gateway=gateway)

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def checkout_payload() -> Dict[str, Any]:
    return {
        "email": "a@b.com",
        "name": "Ada",
        "phone": "0820000000",
        "cart": [{"title": "Vase", "quantity": 2, "price": 50.00, "color": "Red"}],
        "total": 220.00,
        "shippingAddress": "1 Main St",
        "shippingOption": "courier",
        "paymentMethod": "gateway",
    }
