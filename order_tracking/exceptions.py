from orders.validators import HookError


class OrderTrackingError(HookError):
    """Error base del plugin de tracking."""
    pass


class TrackingStorageError(OrderTrackingError):
    """No se pudo leer o escribir el tracking de la orden."""
    pass
