import json
from unittest import mock

from orders.models import Order, OrderNote

from order_tracking.exceptions import TrackingStorageError

from .conftest import TRACKING_NUMBER


def _put(client, path, payload):
    return client.put(path, data=json.dumps(payload), content_type="application/json")


def test_create_and_get_order(client, db):
    resp = client.post(
        "/orders", data=json.dumps({"id": "ORD-7", "status": "processing"}), content_type="application/json"
    )
    assert resp.status_code == 201
    assert resp.json() == {"created": True, "id": "ORD-7", "status": "processing", "version": 0}

    again = client.post("/orders", data=json.dumps({"id": "ORD-7"}), content_type="application/json")
    assert again.status_code == 200
    assert again.json()["created"] is False

    assert client.get("/orders/ORD-7").json()["status"] == "processing"
    assert client.get("/orders/nope").status_code == 404


def test_create_rejects_bad_payload(client, db):
    assert client.post("/orders", data="{nope", content_type="application/json").status_code == 400
    assert client.post(
        "/orders", data=json.dumps({"id": "X", "status": "shipped"}), content_type="application/json"
    ).status_code == 400


def test_status_change_without_tracking(client, order):
    resp = _put(client, "/orders/ORD-1/status", {"status": "on-hold"})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "id": "ORD-1", "status": "on-hold", "version": 1}


def test_status_change_with_tracking_autocompletes(client, tracked_order):
    resp = _put(client, "/orders/ORD-1/status", {"status": "on-hold"})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "id": "ORD-1", "status": "completed", "version": 2}
    assert list(OrderNote.objects.filter(order=tracked_order).values_list("note", flat=True)) == [
        "Order marked as completed due to tracking information added."
    ]


def test_rejected_follow_up_is_reported_as_warning(client, tracked_order):
    resp = _put(client, "/orders/ORD-1/status", {"status": "cancelled"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "cancelled"
    assert body["warnings"] == ["No permitido pasar de cancelled a completed"]
    assert Order.objects.get(pk="ORD-1").status == "cancelled"


def test_status_errors(client, make_order):
    make_order(status="pending")

    assert _put(client, "/orders/ORD-1/status", {"status": "refunded"}).status_code == 400
    assert _put(client, "/orders/ORD-1/status", {}).status_code == 400
    assert _put(client, "/orders/missing/status", {"status": "on-hold"}).status_code == 404
    assert _put(client, "/orders/ORD-1/status", {"status": ["on-hold"]}).status_code == 400
    assert _put(client, "/orders/ORD-1/status", {"status": "on-hold", "version": "abc"}).status_code == 400
    assert Order.objects.get(pk="ORD-1").version == 0

    conflict = _put(client, "/orders/ORD-1/status", {"status": "processing", "version": 5})
    assert conflict.status_code == 409
    assert conflict.json()["conflict"] is True


def test_order_page_renders_tracking_after_table(client, tracked_order):
    resp = client.get("/account/orders/ORD-1")

    assert resp.status_code == 200
    html = resp.content.decode()
    assert html.index("</table>") < html.index('<section class="order-tracking-info">')
    assert TRACKING_NUMBER in html
    assert 'href="/static/order_tracking/css/order-tracking.css?ver=1.0.0"' in html


def test_order_page_without_tracking(client, order):
    html = client.get("/account/orders/ORD-1").content.decode()

    assert "order-tracking-info" not in html
    assert client.get("/account/orders/missing").status_code == 404


def test_storage_failure_in_status_hook_is_reported_as_warning(client, tracked_order):
    broken = mock.Mock()
    broken.get_tracking.side_effect = TrackingStorageError("db down")

    with mock.patch("order_tracking.rules.get_tracking_store", return_value=broken):
        resp = _put(client, "/orders/ORD-1/status", {"status": "on-hold"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "on-hold"
    assert body["warnings"] == ["db down"]
    assert Order.objects.get(pk="ORD-1").status == "on-hold"
