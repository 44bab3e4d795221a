import logging

from django.http import JsonResponse, HttpResponseBadRequest, HttpResponseNotFound
from django.views.decorators.http import require_http_methods

from orders.models import Order
from orders.validators import BadJSON, parse_json_body

from .exceptions import TrackingStorageError
from .services import save_tracking
from .store import TrackingInfo, get_tracking_store

logger = logging.getLogger(__name__)


def _json(data, status=200):
    return JsonResponse(data, status=status, json_dumps_params={"ensure_ascii": False})


def _tracking_payload(order: Order, info: TrackingInfo) -> dict:
    return {"id": order.id, "tracking_number": info.number, "tracking_link": info.link}


@require_http_methods(["GET", "PUT", "PATCH"])
def order_tracking(request, order_id: str):
    """
    GET: tracking actual de la orden.
    PUT: reemplaza ambos campos (si falta una clave, ese campo se borra).
    PATCH: solo toca las claves presentes en el body.
    Códigos: 200 OK, 400 payload inválido, 404 si no existe, 503 si falla el store.
    """
    try:
        order = Order.objects.get(pk=order_id)
    except Order.DoesNotExist:
        return HttpResponseNotFound("order not found")

    store = get_tracking_store()
    try:
        if request.method == "GET":
            return _json(_tracking_payload(order, store.get_tracking(order)))

        try:
            body = parse_json_body(request)
        except BadJSON:
            return HttpResponseBadRequest("invalid payload")

        if request.method == "PATCH":
            current = store.get_tracking(order)
            number = body.get("tracking_number", current.number)
            link = body.get("tracking_link", current.link)
        else:
            number = body.get("tracking_number")
            link = body.get("tracking_link")
        info = save_tracking(order, number, link, store=store)
    except TrackingStorageError as e:
        logger.error("Store de tracking no disponible para la orden %s: %s", order_id, e)
        return _json({"ok": False, "reason": "tracking storage unavailable"}, 503)

    return _json({"ok": True, **_tracking_payload(order, info)})
