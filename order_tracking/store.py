# order_tracking/store.py
"""Adaptador de almacenamiento del tracking (número + link) de una orden.

Contrato de cualquier store:
- ``get_tracking(order) -> TrackingInfo``
- ``set_tracking(order, number, link) -> TrackingInfo`` (valores ya saneados)
Un valor vacío borra el campo guardado; nunca se guarda "".
Los fallos se propagan como ``TrackingStorageError``, sin reintentos.
"""
import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.utils.module_loading import import_string

from orders.models import Order, OrderMeta

from .conf import get_setting
from .exceptions import TrackingStorageError
from .sanitizers import sanitize_text_field, sanitize_url

logger = logging.getLogger(__name__)

TRACKING_NUMBER_KEY = "_tracking_number"
TRACKING_LINK_KEY = "_tracking_link"


@dataclass(frozen=True)
class TrackingInfo:
    number: str | None = None
    link: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.number) and bool(self.link)


def clean_tracking(number, link) -> TrackingInfo:
    return TrackingInfo(
        number=sanitize_text_field(number) or None,
        link=sanitize_url(link) or None,
    )


def _order_pk(order) -> str:
    pk = getattr(order, "pk", order)
    if pk in (None, ""):
        raise TrackingStorageError("La orden no tiene identificador")
    return str(pk)


class OrderMetaTrackingStore:
    """Guarda el tracking como metadatos de la orden (tabla OrderMeta)."""

    number_key = TRACKING_NUMBER_KEY
    link_key = TRACKING_LINK_KEY

    def get_tracking(self, order) -> TrackingInfo:
        pk = _order_pk(order)
        try:
            values = dict(
                OrderMeta.objects.filter(order_id=pk, key__in=[self.number_key, self.link_key])
                .values_list("key", "value")
            )
        except DatabaseError as e:
            raise TrackingStorageError(f"No se pudo leer el tracking de la orden {pk}: {e}") from e
        return TrackingInfo(
            number=values.get(self.number_key) or None,
            link=values.get(self.link_key) or None,
        )

    def set_tracking(self, order, number, link) -> TrackingInfo:
        pk = _order_pk(order)
        info = clean_tracking(number, link)
        try:
            with transaction.atomic():
                if not Order.objects.filter(pk=pk).exists():
                    raise TrackingStorageError(f"Orden {pk} no encontrada")
                self._write(pk, self.number_key, info.number)
                self._write(pk, self.link_key, info.link)
        except DatabaseError as e:
            raise TrackingStorageError(f"No se pudo guardar el tracking de la orden {pk}: {e}") from e
        return info

    @staticmethod
    def _write(pk: str, key: str, value: str | None) -> None:
        if value is None:
            OrderMeta.objects.filter(order_id=pk, key=key).delete()
        else:
            OrderMeta.objects.update_or_create(order_id=pk, key=key, defaults={"value": value})


class InMemoryTrackingStore:
    """Store en memoria del proceso; útil para pruebas y para correr sin base."""

    def __init__(self):
        self._data: dict[str, TrackingInfo] = {}

    def get_tracking(self, order) -> TrackingInfo:
        return self._data.get(_order_pk(order), TrackingInfo())

    def set_tracking(self, order, number, link) -> TrackingInfo:
        pk = _order_pk(order)
        info = clean_tracking(number, link)
        if info.number is None and info.link is None:
            self._data.pop(pk, None)
        else:
            self._data[pk] = info
        return info


_stores: dict[str, object] = {}


def get_tracking_store():
    """Instancia (una por ruta) del store configurado en ORDER_TRACKING["STORE"]."""
    path = get_setting("STORE")
    if path not in _stores:
        logger.debug("Usando store de tracking %s", path)
        _stores[path] = import_string(path)()
    return _stores[path]


def reset_tracking_stores() -> None:
    """Olvida las instancias creadas por ``get_tracking_store``."""
    _stores.clear()
