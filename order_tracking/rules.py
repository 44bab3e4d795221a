# order_tracking/rules.py
"""Regla de auto-completado por tracking.

Si una orden que estaba en ``processing`` cambia a cualquier estado distinto
de ``completed`` y ya tiene número y link de tracking, se la pasa a
``completed``. La regla mira el estado anterior, no el nuevo.
"""
import logging
from dataclasses import dataclass

from django.utils.translation import gettext_lazy as _

from orders.models import OrderStatus

from .store import get_tracking_store

logger = logging.getLogger(__name__)

AUTOCOMPLETE_NOTE = _("Order marked as completed due to tracking information added.")


@dataclass(frozen=True)
class StatusTransition:
    status: str
    note: str


def evaluate_status_change(
    old_status: str,
    new_status: str,
    has_tracking_number: bool,
    has_tracking_link: bool,
) -> StatusTransition | None:
    if (
        has_tracking_number
        and has_tracking_link
        and old_status == OrderStatus.PROCESSING
        and new_status != OrderStatus.COMPLETED
    ):
        return StatusTransition(status=OrderStatus.COMPLETED.value, note=str(AUTOCOMPLETE_NOTE))
    return None


def apply_tracking_rule(order, old_status: str, new_status: str, store=None) -> StatusTransition | None:
    """Evalúa la regla y, si aplica, pide el cambio a ``completed``.

    Si la plataforma rechaza la transición (InvalidStatus) el error sube tal
    cual al que disparó el cambio de estado.
    """
    if store is None:
        store = get_tracking_store()
    tracking = store.get_tracking(order)
    transition = evaluate_status_change(old_status, new_status, bool(tracking.number), bool(tracking.link))
    if transition is None:
        return None

    logger.info(
        "Orden %s con tracking pasó de %s a %s; se marca como %s",
        order.pk, old_status, new_status, transition.status,
    )
    order.update_status(transition.status, note=transition.note)
    return transition
