import logging

from orders.publisher import publish_order_tracking_updated

from .conf import get_setting
from .store import TrackingInfo, get_tracking_store

logger = logging.getLogger(__name__)


def save_tracking(order, number, link, store=None) -> TrackingInfo:
    """Guarda el tracking (vacío = borrar) y publica ``order.tracking.updated``."""
    if store is None:
        store = get_tracking_store()
    info = store.set_tracking(order, number, link)
    logger.info("Tracking de la orden %s: número=%r link=%r", order.pk, info.number, info.link)
    if get_setting("PUBLISH_EVENTS"):
        publish_order_tracking_updated(order.pk, info.number, info.link)
    return info
