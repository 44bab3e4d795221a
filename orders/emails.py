# orders/emails.py
"""Correos transaccionales de la orden.

El cuerpo se arma con plantillas y cada plugin puede inyectar su fragmento
a través de ``email_order_details``.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import format_html_join
from django.utils.safestring import mark_safe
from django.utils.translation import gettext as _

from .signals import collect_fragments, email_order_details

logger = logging.getLogger(__name__)

CUSTOMER_COMPLETED_ORDER = "customer_completed_order"


def render_order_email(order, email_id: str, sent_to_admin: bool = False, plain_text: bool = False) -> str:
    fragments = collect_fragments(
        email_order_details,
        sender=type(order),
        order=order,
        email=email_id,
        sent_to_admin=sent_to_admin,
        plain_text=plain_text,
    )
    if plain_text:
        order_details = "".join(fragments)
        template = f"orders/emails/{email_id}.txt"
    else:
        # Los fragmentos HTML ya vienen escapados por quien los genera
        order_details = format_html_join("\n", "{}", ((mark_safe(f),) for f in fragments))
        template = f"orders/emails/{email_id}.html"
    return render_to_string(template, {"order": order, "order_details": order_details})


def send_customer_completed_order(order) -> bool:
    if not order.email:
        logger.info("Orden %s sin email; no se envía %s", order.id, CUSTOMER_COMPLETED_ORDER)
        return False

    message = EmailMultiAlternatives(
        subject=_("Your order %(order)s is complete") % {"order": order.id},
        body=render_order_email(order, CUSTOMER_COMPLETED_ORDER, plain_text=True),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[order.email],
    )
    message.attach_alternative(render_order_email(order, CUSTOMER_COMPLETED_ORDER), "text/html")
    try:
        message.send()
    except (smtplib.SMTPException, OSError) as e:
        # Un fallo de SMTP no debe tumbar el cambio de estado
        logger.error("No se pudo enviar %s para la orden %s: %s", CUSTOMER_COMPLETED_ORDER, order.id, e)
        return False
    return True


def on_order_status_changed(sender, order, old_status, new_status, **kwargs):
    if new_status == "completed":
        send_customer_completed_order(order)
