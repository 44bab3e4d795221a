import json
from unittest import mock

from order_tracking.exceptions import TrackingStorageError

from .conftest import TRACKING_LINK, TRACKING_NUMBER

URL = "/orders/ORD-1/tracking"


def _send(client, method, payload, url=URL):
    return getattr(client, method)(url, data=json.dumps(payload), content_type="application/json")


def test_get_empty_tracking(client, order):
    resp = client.get(URL)

    assert resp.status_code == 200
    assert resp.json() == {"id": "ORD-1", "tracking_number": None, "tracking_link": None}


def test_put_stores_sanitized_values(client, order, store):
    resp = _send(client, "put", {"tracking_number": "<b>ABC123</b>", "tracking_link": "carrier.example/ABC123"})

    assert resp.status_code == 200
    assert resp.json() == {
        "ok": True,
        "id": "ORD-1",
        "tracking_number": "ABC123",
        "tracking_link": "http://carrier.example/ABC123",
    }
    assert store.get_tracking(order).number == "ABC123"


def test_put_without_link_clears_it(client, tracked_order, store):
    resp = _send(client, "put", {"tracking_number": TRACKING_NUMBER})

    assert resp.json()["tracking_link"] is None
    assert store.get_tracking(tracked_order).link is None


def test_patch_keeps_missing_keys(client, tracked_order, store):
    resp = _send(client, "patch", {"tracking_number": "XYZ789"})

    assert resp.json()["tracking_number"] == "XYZ789"
    assert resp.json()["tracking_link"] == TRACKING_LINK


def test_put_publishes_tracking_event(client, order):
    with mock.patch("order_tracking.services.publish_order_tracking_updated") as publish:
        _send(client, "put", {"tracking_number": TRACKING_NUMBER, "tracking_link": TRACKING_LINK})

    publish.assert_called_once_with("ORD-1", TRACKING_NUMBER, TRACKING_LINK)


def test_publishing_can_be_disabled(client, order, settings):
    settings.ORDER_TRACKING = {"PUBLISH_EVENTS": False}
    with mock.patch("order_tracking.services.publish_order_tracking_updated") as publish:
        _send(client, "put", {"tracking_number": TRACKING_NUMBER, "tracking_link": TRACKING_LINK})

    publish.assert_not_called()


def test_errors(client, order):
    assert client.get("/orders/missing/tracking").status_code == 404
    assert client.put(URL, data="{nope", content_type="application/json").status_code == 400
    assert client.post(URL, data="{}", content_type="application/json").status_code == 405


def test_storage_failure_returns_503(client, order):
    broken = mock.Mock()
    broken.get_tracking.side_effect = TrackingStorageError("db down")
    broken.set_tracking.side_effect = TrackingStorageError("db down")

    with mock.patch("order_tracking.views.get_tracking_store", return_value=broken):
        assert client.get(URL).status_code == 503
        resp = _send(client, "put", {"tracking_number": TRACKING_NUMBER})

    assert resp.status_code == 503
    assert resp.json() == {"ok": False, "reason": "tracking storage unavailable"}
