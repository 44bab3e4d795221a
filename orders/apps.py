from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"

    def ready(self):
        from .emails import on_order_status_changed
        from .models import Order
        from .signals import order_status_changed

        order_status_changed.connect(
            on_order_status_changed, sender=Order, dispatch_uid="orders.send_status_emails"
        )
