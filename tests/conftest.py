import itertools
import json
import os
from typing import Any, Dict, Generator, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

# Avant tout import de storefront (config lue à l'import)
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost,127.0.0.1")

from storefront import config
from storefront.app_setup.factory import create_app
from storefront.payments import paypal_client

PAYPAL_BASE = "https://api-m.sandbox.paypal.com"


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def app():
    return create_app()


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Aucun secret réel, catalogue sur un répertoire temporaire."""
    public = tmp_path / "public"
    (public / "products").mkdir(parents=True)
    monkeypatch.setattr(config, "PUBLIC_DIR", public)
    monkeypatch.setattr(config, "PRODUCTS_DIR", public / "products")
    monkeypatch.setattr(config, "PRECOMPUTED_CACHE_FILE", public / "products-cache.json")
    monkeypatch.setattr(config, "SITE_URL", "https://shop.example")
    monkeypatch.setattr(config, "SITE_NAME", "Souq")
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "")
    monkeypatch.setattr(config, "PAYPAL_CLIENT_ID", "")
    monkeypatch.setattr(config, "PAYPAL_CLIENT_SECRET", "")
    monkeypatch.setattr(config, "BITCOIN_ADDRESS", "")
    return public


@pytest.fixture(autouse=True)
def mock_db_dependency(monkeypatch):
    """Aucun accès Supabase pendant les tests."""
    monkeypatch.setattr("storefront.catalog.repository.get_supabase", lambda: MagicMock())


class FakeStripe:
    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.sessions: Dict[str, Dict[str, Any]] = {}


@pytest.fixture
def fake_stripe(monkeypatch) -> FakeStripe:
    """Remplace stripe.checkout.Session.create/retrieve (aucun appel réseau)."""
    import stripe

    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    fake = FakeStripe()
    calls, sessions = fake.calls, fake.sessions

    def _create(**params):
        calls.append(params)
        sid = f"cs_test_{len(calls)}"
        session = {"id": sid, "url": f"https://checkout.stripe.test/{sid}", "payment_status": "unpaid"}
        sessions[sid] = session
        return session

    def _retrieve(session_id, **kwargs):
        if session_id not in sessions:
            raise stripe.InvalidRequestError("No such checkout.session", "id", http_status=404)
        return sessions[session_id]

    monkeypatch.setattr(stripe.checkout.Session, "create", _create)
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", _retrieve)
    return fake


class FakePayPal:
    """
    API PayPal v2 Orders minimale en mémoire (via httpx.MockTransport).
    - capture_error: (status, body) renvoyé par la prochaine capture
    - capture_race: la prochaine capture échoue après qu'une capture concurrente a abouti
    - get_error_after_capture: (status, body) renvoyé par toute lecture d'ordre postérieure à une capture
    """

    def __init__(self):
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.capture_calls = 0
        self.token_calls = 0
        self.token_error: Optional[Tuple[int, Any]] = None
        self.capture_error: Optional[Tuple[int, Any]] = None
        self.get_error: Optional[Tuple[int, Any]] = None
        self.get_error_after_capture: Optional[Tuple[int, Any]] = None
        self.capture_race = False
        self.omit_approve_link = False
        self._ids = itertools.count(1)

    def add_order(self, order_id: str = "ORDER-1", items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        order = {
            "id": order_id,
            "status": "APPROVED",
            "purchase_units": [{
                "amount": {"currency_code": "USD", "value": "50.00"},
                "items": items if items is not None else [{"name": "Theme", "quantity": "1"}],
            }],
        }
        self.orders[order_id] = order
        return order

    def _mark_captured(self, order: Dict[str, Any]) -> Dict[str, Any]:
        capture = {"id": f"CAP-{next(self._ids)}", "status": "COMPLETED"}
        order["status"] = "COMPLETED"
        order["purchase_units"][0].setdefault("payments", {}).setdefault("captures", []).append(capture)
        return capture

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/v1/oauth2/token":
            self.token_calls += 1
            if self.token_error:
                return httpx.Response(self.token_error[0], json=self.token_error[1])
            return httpx.Response(200, json={"access_token": "A21-test-token", "token_type": "Bearer"})

        assert request.headers["Authorization"] == "Bearer A21-test-token"
        if path == "/v2/checkout/orders" and request.method == "POST":
            payload = json.loads(request.content)
            order_id = f"ORDER-{next(self._ids)}"
            order = {"id": order_id, "status": "CREATED", "purchase_units": payload["purchase_units"]}
            self.orders[order_id] = order
            links = [{"rel": "self", "href": f"{PAYPAL_BASE}/v2/checkout/orders/{order_id}"}]
            if not self.omit_approve_link:
                links.append({"rel": "approve", "href": f"https://www.sandbox.paypal.com/checkoutnow?token={order_id}"})
            return httpx.Response(201, json={**order, "links": links})

        parts = path.strip("/").split("/")
        order_id = parts[3] if len(parts) > 3 else ""
        order = self.orders.get(order_id)
        if order is None:
            return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND"})

        if request.method == "GET":
            if self.get_error:
                return httpx.Response(self.get_error[0], json=self.get_error[1])
            return httpx.Response(200, json=order)

        if path.endswith("/capture"):
            self.capture_calls += 1
            if self.get_error_after_capture:
                self.get_error = self.get_error_after_capture
            if self.capture_race:
                self.capture_race = False
                self._mark_captured(order)
                return httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY", "details": [{"issue": "ORDER_ALREADY_CAPTURED"}]})
            if self.capture_error:
                status, body = self.capture_error
                return httpx.Response(status, json=body)
            capture = self._mark_captured(order)
            return httpx.Response(201, json={
                "id": order_id,
                "status": "COMPLETED",
                "purchase_units": [{"payments": {"captures": [capture]}}],
            })
        return httpx.Response(405)

    def client(self) -> paypal_client.PayPalClient:
        return paypal_client.PayPalClient("client-id", "client-secret", PAYPAL_BASE, transport=self.transport())


@pytest.fixture
def fake_paypal(monkeypatch) -> FakePayPal:
    fake = FakePayPal()
    monkeypatch.setattr(config, "PAYPAL_CLIENT_ID", "client-id")
    monkeypatch.setattr(config, "PAYPAL_CLIENT_SECRET", "client-secret")
    monkeypatch.setattr(paypal_client, "from_config", lambda transport=None: fake.client())
    return fake


def _cart_item(product_id: Any = 1, price: int = 5000, count: int = 1, **product: Any) -> Dict[str, Any]:
    """CartItem JSON tel qu'envoyé par le front."""
    return {
        "product": {
            "id": product_id,
            "name": product.pop("name", f"Produit {product_id}"),
            "slug": product.pop("slug", f"produit-{product_id}"),
            "price": price,
            "currency": product.pop("currency", "usd"),
            "description": product.pop("description", "<p>Description</p>"),
            **product,
        },
        "count": count,
    }


@pytest.fixture
def make_cart_item():
    return _cart_item
