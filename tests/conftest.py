"""
Pytest configuration and fixtures.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from booking_schemas import BookingStatus, PaymentEvent, PaymentStatus
from config import Settings
from payments.checkout import ProviderError, XenditClient
from persistence.crud import BookingStore, StoreError
from persistence.db import init_db, make_engine, make_session_factory
from persistence.models import BookingModel
from server import create_app


class FakeProvider:
    """In-memory stand-in for the invoice API."""

    def __init__(self):
        self.invoices = {}
        self.fail = False
        self.fetched = []

    def add_invoice(self, invoice_id, status, external_id, metadata=None):
        self.invoices[invoice_id] = PaymentEvent(
            id=invoice_id, status=status, external_id=external_id, metadata=metadata
        )

    def fetch_invoice_status(self, invoice_id):
        self.fetched.append(invoice_id)
        if self.fail or invoice_id not in self.invoices:
            raise ProviderError(f"invoice {invoice_id} unavailable")
        return self.invoices[invoice_id]

    def create_invoice(self, booking_id, amount, description=None, customer_email=None, remarks=None):
        raise ProviderError("not wired in this test")


class BrokenStore:
    def mark_paid_and_confirmed(self, booking_id):
        raise StoreError("connection refused")

    def booking_exists(self, booking_id):
        return True


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        xendit_secret_key="xnd_development_test",
        xendit_api_url="https://xendit.test/v2",
        database_url=f"sqlite:///{tmp_path / 'bookings.db'}",
        frontend_url="http://frontend.test",
    )


@pytest.fixture
def session_factory(test_settings):
    engine = make_engine(test_settings.database_url)
    init_db(engine)
    factory = make_session_factory(engine)
    with factory() as db:
        db.add_all([
            BookingModel(id="42", payment_status=PaymentStatus.UNPAID.value, status=BookingStatus.PENDING.value),
            BookingModel(id="7", payment_status=PaymentStatus.UNPAID.value, status=BookingStatus.PENDING.value),
        ])
        db.commit()
    yield factory
    engine.dispose()


@pytest.fixture
def store(session_factory) -> BookingStore:
    return BookingStore(session_factory)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(test_settings, provider, store):
    app = create_app(test_settings, provider=provider, store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def xendit_requests():
    """Requests seen by the mocked Xendit API."""
    return []


@pytest.fixture
def xendit_transport(xendit_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        xendit_requests.append(request)
        if request.method == "POST" and request.url.path == "/v2/invoices":
            body = json.loads(request.content)
            return httpx.Response(200, json={
                "id": "inv_123",
                "external_id": body["external_id"],
                "status": "PENDING",
                "invoice_url": "https://checkout.xendit.test/web/inv_123",
            })
        if request.method == "GET" and request.url.path == "/v2/invoices/inv_paid":
            return httpx.Response(200, json={
                "id": "inv_paid",
                "external_id": "booking_42_1690000000000",
                "status": "PAID",
            })
        return httpx.Response(404, json={"error_code": "INVOICE_NOT_FOUND_ERROR"})

    return httpx.MockTransport(handler)


@pytest.fixture
def xendit_client(test_settings, xendit_transport) -> XenditClient:
    client = XenditClient.from_settings(test_settings, http_client=httpx.Client(transport=xendit_transport))
    yield client
    client.close()
