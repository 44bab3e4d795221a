import logging

from django.apps import AppConfig, apps
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger(__name__)


class OrderTrackingConfig(AppConfig):
    name = "order_tracking"
    verbose_name = _("Order Tracking")

    def ready(self):
        # Sin la plataforma de órdenes no hay nada a qué engancharse
        if not apps.is_installed("orders"):
            logger.warning("La app 'orders' no está instalada; order_tracking queda inactivo")
            return

        from orders.features import CUSTOM_ORDER_TABLES, declare_compatibility

        from . import handlers

        handlers.connect()
        declare_compatibility(CUSTOM_ORDER_TABLES, self.label, compatible=True)
