# orders/signals.py
"""Hooks que la plataforma de órdenes expone a los plugins.

Cada señal documenta los kwargs que envía. Las que esperan un valor de vuelta
(fragmentos, campos de formulario, hojas de estilo) lo leen de la lista de
respuestas que retorna ``Signal.send``.
"""
from django.dispatch import Signal

# order, old_status, new_status
order_status_changed = Signal()

# order (None en el alta) -> dict[str, forms.Field]
order_admin_form_fields = Signal()

# order, data (cleaned_data del formulario de admin)
process_order_meta = Signal()

# order, email, sent_to_admin, plain_text -> fragmento de texto/HTML
email_order_details = Signal()

# order, request -> fragmento HTML
order_details_after_table = Signal()

# request, page -> StyleAsset | None
enqueue_styles = Signal()


def collect_fragments(signal, **kwargs) -> list[str]:
    """Envía la señal y devuelve las respuestas no vacías en orden de registro."""
    return [str(response) for _receiver, response in signal.send(**kwargs) if response]
