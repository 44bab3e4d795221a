# order_tracking/conf.py
"""Settings del plugin, leídos de ``settings.ORDER_TRACKING`` en cada acceso."""
from django.conf import settings

DEFAULTS = {
    "STORE": "order_tracking.store.OrderMetaTrackingStore",
    "COMPLETED_EMAIL_ID": "customer_completed_order",
    "STYLESHEET": "order_tracking/css/order-tracking.css",
    "STYLESHEET_VERSION": "1.0.0",
    "PUBLISH_EVENTS": True,
}


def get_setting(name: str):
    overrides = getattr(settings, "ORDER_TRACKING", None) or {}
    return overrides.get(name, DEFAULTS[name])
