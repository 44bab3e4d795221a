"""
Fixtures compartidas: órdenes de prueba, store de tracking y broker apagado.
"""
import pytest

from orders.models import Order
from order_tracking.store import OrderMetaTrackingStore, reset_tracking_stores

TRACKING_NUMBER = "ABC123"
TRACKING_LINK = "https://carrier.example/ABC123"


@pytest.fixture(autouse=True)
def no_broker(monkeypatch):
    """Ningún test publica a RabbitMQ de verdad."""
    monkeypatch.setattr("orders.publisher.RABBIT_HOST", None)


@pytest.fixture(autouse=True)
def fresh_tracking_stores():
    """Cada test arranca sin stores cacheados de tests anteriores."""
    reset_tracking_stores()
    yield
    reset_tracking_stores()


@pytest.fixture
def make_order(db):
    def _make(order_id="ORD-1", status="processing", email="customer@example.com"):
        return Order.objects.create(id=order_id, status=status, email=email)
    return _make


@pytest.fixture
def order(make_order):
    return make_order()


@pytest.fixture
def store():
    return OrderMetaTrackingStore()


@pytest.fixture
def tracked_order(order, store):
    store.set_tracking(order, TRACKING_NUMBER, TRACKING_LINK)
    return order
