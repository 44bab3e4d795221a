# order_tracking/handlers.py
"""Receptores que conectan el plugin con los hooks de ``orders``."""
from django import forms
from django.utils.translation import gettext_lazy as _

from orders.assets import ACCOUNT_PAGE, StyleAsset
from orders.models import Order
from orders import signals

from .conf import get_setting
from .formatting import EmailContext, tracking_email_fragment, tracking_page_section
from .rules import apply_tracking_rule
from .services import save_tracking
from .store import TrackingInfo, get_tracking_store

STYLE_HANDLE = "order-tracking"


def add_tracking_fields(sender, order=None, **kwargs):
    tracking = get_tracking_store().get_tracking(order) if order is not None else TrackingInfo()
    return {
        "tracking_number": forms.CharField(
            label=_("Tracking Number:"),
            required=False,
            max_length=255,
            initial=tracking.number or "",
        ),
        "tracking_link": forms.CharField(
            label=_("Tracking Link:"),
            required=False,
            initial=tracking.link or "",
            widget=forms.URLInput(attrs={"placeholder": "https://"}),
        ),
    }


def save_tracking_fields(sender, order, data, **kwargs):
    save_tracking(order, data.get("tracking_number"), data.get("tracking_link"))


def handle_tracking_on_status_change(sender, order, old_status, new_status, **kwargs):
    apply_tracking_rule(order, old_status, new_status)


def add_tracking_to_email(sender, order, email, sent_to_admin=False, plain_text=False, **kwargs):
    context = EmailContext(email_id=email, sent_to_admin=sent_to_admin, plain_text=plain_text)
    return tracking_email_fragment(get_tracking_store().get_tracking(order), context)


def display_tracking_info(sender, order, **kwargs):
    return tracking_page_section(get_tracking_store().get_tracking(order))


def enqueue_styles(sender, page=None, **kwargs):
    if page != ACCOUNT_PAGE:
        return None
    return StyleAsset(
        handle=STYLE_HANDLE,
        path=get_setting("STYLESHEET"),
        version=get_setting("STYLESHEET_VERSION"),
    )


def connect():
    signals.order_admin_form_fields.connect(
        add_tracking_fields, sender=Order, dispatch_uid="order_tracking.add_tracking_fields"
    )
    signals.process_order_meta.connect(
        save_tracking_fields, sender=Order, dispatch_uid="order_tracking.save_tracking_fields"
    )
    signals.order_status_changed.connect(
        handle_tracking_on_status_change, sender=Order, dispatch_uid="order_tracking.status_changed"
    )
    signals.email_order_details.connect(
        add_tracking_to_email, sender=Order, dispatch_uid="order_tracking.email_order_details"
    )
    signals.order_details_after_table.connect(
        display_tracking_info, sender=Order, dispatch_uid="order_tracking.order_details"
    )
    signals.enqueue_styles.connect(
        enqueue_styles, sender=Order, dispatch_uid="order_tracking.enqueue_styles"
    )
