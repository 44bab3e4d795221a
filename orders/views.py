import logging

from django.http import JsonResponse, HttpResponseBadRequest, HttpResponseNotFound
from django.shortcuts import get_object_or_404, render
from django.utils.safestring import mark_safe
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from .assets import ACCOUNT_PAGE
from .models import Order, OrderStatus
from .publisher import publish_order_created
from .signals import collect_fragments, enqueue_styles, order_details_after_table
from .validators import parse_json_body, BadJSON, HookError, InvalidStatus, VersionConflict

logger = logging.getLogger(__name__)


def _json(data, status=200):
    return JsonResponse(data, status=status, json_dumps_params={"ensure_ascii": False})


def _order_payload(o: Order) -> dict:
    return {"id": o.id, "status": o.status, "version": o.version}


@require_GET
def get_order(request, order_id: str):
    try:
        o = Order.objects.get(pk=order_id)
        return _json(_order_payload(o))
    except Order.DoesNotExist:
        return HttpResponseNotFound("order not found")

@require_POST
def create_order(request):
    try:
        body = parse_json_body(request)
        oid = str(body["id"])
        status = body.get("status", OrderStatus.PENDING)
    except (BadJSON, KeyError):
        return HttpResponseBadRequest("invalid payload")
    if status not in OrderStatus.values:
        return HttpResponseBadRequest("invalid status")

    obj, created = Order.objects.get_or_create(
        id=oid, defaults={"status": status, "email": body.get("email") or ""}
    )
    if created:
        publish_order_created(obj.id, obj.status)
    return _json({"created": created, **_order_payload(obj)}, 201 if created else 200)

@require_http_methods(["PUT", "PATCH"])
def update_status(request, order_id: str):
    """
    Ruta crítica:
    - Persiste el estado en una transacción corta (Order.set_status).
    - Maneja control optimista opcional por 'version'.
    - Publica el evento y dispara los hooks fuera de la transacción.
    - Códigos: 200 OK, 404 si no existe, 409 si hay conflicto de versión, 400 si payload inválido.
    - Si un hook falla después de guardar, se informa en 'warnings' (el cambio ya quedó).
    """
    try:
        body = parse_json_body(request)
        new_status = body["status"]
        if not isinstance(new_status, str):
            raise BadJSON("'status' debe ser un string")
        expected   = body.get("version")   # int opcional para control optimista
        if expected is not None:
            expected = int(expected)
        meta       = body.get("meta", {})  # opcional: quién actualiza, timestamp cliente, etc.
        note       = body.get("note", "")
    except (BadJSON, KeyError, TypeError, ValueError):
        return HttpResponseBadRequest("invalid payload")

    try:
        order = Order.objects.get(pk=order_id)
        old_status = order.set_status(new_status, note=note, expected_version=expected)
    except Order.DoesNotExist:
        return HttpResponseNotFound("order not found")
    except VersionConflict:
        return _json({"ok": False, "conflict": True, "reason": "version mismatch"}, 409)
    except InvalidStatus as e:
        return HttpResponseBadRequest(str(e))

    warnings = []
    try:
        order.notify_status_changed(old_status, meta=meta)
    except (InvalidStatus, HookError) as e:
        logger.warning("Hook de cambio de estado falló para la orden %s: %s", order.id, e)
        warnings.append(str(e))

    response = {"ok": True, **_order_payload(order)}
    if warnings:
        response["warnings"] = warnings
    return _json(response)


@require_GET
def order_detail_page(request, order_id: str):
    """Página de la orden en la cuenta del cliente."""
    order = get_object_or_404(Order, pk=order_id)
    stylesheets = [
        asset for _receiver, asset in enqueue_styles.send(sender=Order, request=request, page=ACCOUNT_PAGE) if asset
    ]
    fragments = collect_fragments(order_details_after_table, sender=Order, order=order, request=request)
    return render(
        request,
        "orders/order_detail.html",
        {
            "order": order,
            "stylesheets": stylesheets,
            # Cada plugin escapa su propio fragmento
            "after_order_table": mark_safe("\n".join(fragments)),
        },
    )
