"""
Escenario completo: el admin carga el tracking de una orden en processing,
después llega un cambio a on-hold y la orden termina completed, con el
tracking en el correo y en la página del cliente.
"""
import json

from orders.models import Order, OrderNote

from .conftest import TRACKING_LINK, TRACKING_NUMBER


def test_tracking_completes_order_and_reaches_customer(client, order, mailoutbox):
    resp = client.put(
        "/orders/ORD-1/tracking",
        data=json.dumps({"tracking_number": TRACKING_NUMBER, "tracking_link": TRACKING_LINK}),
        content_type="application/json",
    )
    assert resp.status_code == 200

    resp = client.put("/orders/ORD-1/status", data=json.dumps({"status": "on-hold"}), content_type="application/json")
    assert resp.json()["status"] == "completed"

    order = Order.objects.get(pk="ORD-1")
    assert order.status == "completed"
    assert OrderNote.objects.filter(
        order=order, note="Order marked as completed due to tracking information added."
    ).count() == 1

    assert len(mailoutbox) == 1
    email = mailoutbox[0]
    assert email.to == ["customer@example.com"]
    assert f"Tracking Number: {TRACKING_NUMBER}\nTracking Link: {TRACKING_LINK}\n" in email.body
    html, mimetype = email.alternatives[0]
    assert mimetype == "text/html"
    assert f'<a href="{TRACKING_LINK}" target="_blank"' in html
    assert "Track Your Order" in html

    page = client.get("/account/orders/ORD-1").content.decode()
    assert '<section class="order-tracking-info">' in page
    assert f'href="{TRACKING_LINK}"' in page


def test_half_set_tracking_never_completes(client, order, mailoutbox):
    client.put(
        "/orders/ORD-1/tracking",
        data=json.dumps({"tracking_number": TRACKING_NUMBER}),
        content_type="application/json",
    )
    resp = client.put("/orders/ORD-1/status", data=json.dumps({"status": "on-hold"}), content_type="application/json")

    assert resp.json()["status"] == "on-hold"
    assert mailoutbox == []
    assert "order-tracking-info" not in client.get("/account/orders/ORD-1").content.decode()
