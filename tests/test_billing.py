"""
Tests for checkout and the Xendit webhook.
"""

from uuid import uuid4

import httpx
import pytest

from app.main import app
from app.api.dependencies import get_xendit_service
from app.domain.enums import PurchaseStatus
from app.infrastructure.external_services.xendit_service import XenditService
from app.infrastructure.orm import PurchaseModel, UserModel, WebhookEventModel
from tests.helpers import auth_headers, recording_transport

CALLBACK_HEADERS = {"x-callback-token": "test-callback-token"}


class FakeXendit(XenditService):
    """Xendit client that records invoices instead of calling the API"""

    def __init__(self):
        super().__init__()
        self.invoices = []

    async def create_invoice(self, external_id, amount, payer_email, description,
                             success_redirect_url, failure_redirect_url, callback_url=None):
        self.invoices.append({"external_id": external_id, "amount": amount})
        return {"id": f"inv-{external_id}", "invoice_url": f"https://checkout.xendit.test/{external_id}"}


@pytest.fixture
def fake_xendit():
    fake = FakeXendit()
    app.dependency_overrides[get_xendit_service] = lambda: fake
    return fake


@pytest.fixture
def pending_purchase(db_session, customer, credit_package):
    purchase = PurchaseModel(
        user_id=customer.id,
        package_id=credit_package.id,
        amount=credit_package.price,
        ext_invoice_id="inv-123",
    )
    db_session.add(purchase)
    db_session.commit()
    return purchase


class TestCheckout:

    def test_checkout_creates_invoice(self, client, customer, credit_package, fake_xendit, db_session):
        response = client.post(
            "/api/v1/billing/checkout",
            json={"package_id": str(credit_package.id)},
            headers=auth_headers(customer),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ext_invoice_id"] == f"inv-{data['purchase_id']}"
        assert data["payment_url"].startswith("https://checkout.xendit.test/")
        assert fake_xendit.invoices[0]["amount"] == 100000

        purchase = db_session.query(PurchaseModel).one()
        assert purchase.status == PurchaseStatus.PENDING

    def test_checkout_inactive_package(self, client, customer, credit_package, fake_xendit, db_session):
        credit_package.is_active = False
        db_session.commit()

        response = client.post(
            "/api/v1/billing/checkout",
            json={"package_id": str(credit_package.id)},
            headers=auth_headers(customer),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Package not available"

    def test_checkout_unknown_package(self, client, customer, fake_xendit):
        response = client.post(
            "/api/v1/billing/checkout",
            json={"package_id": str(uuid4())},
            headers=auth_headers(customer),
        )

        assert response.status_code == 400

    def test_invoice_request_uses_basic_auth(self, client, customer, credit_package):
        """The real client posts to /v2/invoices with the secret key as username"""
        transport = recording_transport(
            lambda request: httpx.Response(200, json={"id": "inv-real", "invoice_url": "https://pay.test/inv-real"})
        )
        app.dependency_overrides[get_xendit_service] = lambda: XenditService(transport=transport)

        response = client.post(
            "/api/v1/billing/checkout",
            json={"package_id": str(credit_package.id)},
            headers=auth_headers(customer),
        )

        assert response.status_code == 200
        assert response.json()["ext_invoice_id"] == "inv-real"
        request = transport.requests[-1]
        assert str(request.url) == "https://api.xendit.co/v2/invoices"
        assert request.headers["Authorization"].startswith("Basic ")


class TestXenditWebhook:

    def test_invalid_token_is_acknowledged_but_ignored(self, client, pending_purchase, db_session):
        response = client.post(
            "/api/v1/billing/webhook/xendit",
            json={"id": "inv-123", "status": "PAID"},
            headers={"x-callback-token": "wrong"},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": False}
        db_session.expire_all()
        assert db_session.get(PurchaseModel, pending_purchase.id).status == PurchaseStatus.PENDING

    def test_paid_webhook_grants_credits_once(self, client, customer, pending_purchase, db_session):
        """Replaying the same callback does not grant credits twice"""
        payload = {"id": "inv-123", "status": "PAID"}

        for _ in range(2):
            response = client.post("/api/v1/billing/webhook/xendit", json=payload, headers=CALLBACK_HEADERS)
            assert response.json() == {"ok": True}

        db_session.expire_all()
        assert db_session.get(UserModel, customer.id).credits == 10
        purchase = db_session.get(PurchaseModel, pending_purchase.id)
        assert purchase.status == PurchaseStatus.PAID
        assert purchase.paid_at is not None
        assert db_session.query(WebhookEventModel).count() == 1

    def test_settled_after_paid_is_idempotent(self, client, customer, pending_purchase, db_session):
        client.post("/api/v1/billing/webhook/xendit", json={"id": "inv-123", "status": "PAID"}, headers=CALLBACK_HEADERS)
        client.post(
            "/api/v1/billing/webhook/xendit",
            json={"data": {"id": "inv-123", "status": "SETTLED"}},
            headers=CALLBACK_HEADERS,
        )

        db_session.expire_all()
        assert db_session.get(UserModel, customer.id).credits == 10
        assert db_session.query(WebhookEventModel).count() == 2

    def test_other_status_is_recorded_only(self, client, customer, pending_purchase, db_session):
        client.post("/api/v1/billing/webhook/xendit", json={"id": "inv-123", "status": "EXPIRED"}, headers=CALLBACK_HEADERS)

        db_session.expire_all()
        event = db_session.query(WebhookEventModel).one()
        assert event.result == "ignored:EXPIRED"
        assert db_session.get(UserModel, customer.id).credits == 0

    def test_unknown_invoice_is_recorded_as_error(self, client, db_session):
        response = client.post(
            "/api/v1/billing/webhook/xendit",
            json={"id": "inv-missing", "status": "PAID"},
            headers=CALLBACK_HEADERS,
        )

        assert response.json() == {"ok": True}
        db_session.expire_all()
        assert db_session.query(WebhookEventModel).one().error

    def test_my_purchases(self, client, customer, pending_purchase):
        response = client.get("/api/v1/billing/purchases/me", headers=auth_headers(customer))

        assert response.status_code == 200
        assert [row["ext_invoice_id"] for row in response.json()] == ["inv-123"]
