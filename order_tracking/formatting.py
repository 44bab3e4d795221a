# order_tracking/formatting.py
"""Un solo formato para el tracking: correo de orden completada y página del cliente."""
import enum
from dataclasses import dataclass

from django.template.loader import render_to_string
from django.utils.translation import gettext as _

from .conf import get_setting
from .sanitizers import sanitize_url
from .store import TrackingInfo

LINK_CSS_CLASS = "order-tracking-link"
SECTION_CSS_CLASS = "order-tracking-info"


class RenderMode(enum.Enum):
    PLAIN_TEXT = "plain_text"
    RICH = "rich"


@dataclass(frozen=True)
class EmailContext:
    email_id: str
    sent_to_admin: bool = False
    plain_text: bool = False

    @property
    def mode(self) -> RenderMode:
        return RenderMode.PLAIN_TEXT if self.plain_text else RenderMode.RICH


def format_tracking(number: str | None, link: str | None, mode: RenderMode = RenderMode.RICH) -> str:
    """
    Fragmento con número y link de tracking.
    - PLAIN_TEXT: dos líneas "Tracking Number: ..." / "Tracking Link: ...".
    - RICH: HTML escapado por la plantilla, con el link "Track Your Order".
    Retorna "" si falta alguno de los dos (o si el link no es una URL usable).
    """
    number = (number or "").strip()
    link = sanitize_url(link)
    if not number or not link:
        return ""

    if mode is RenderMode.PLAIN_TEXT:
        return f"{_('Tracking Number:')} {number}\n{_('Tracking Link:')} {link}\n"
    return render_to_string(
        "order_tracking/tracking_info.html",
        {"number": number, "link": link, "link_class": LINK_CSS_CLASS},
    )


def tracking_email_fragment(tracking: TrackingInfo, context: EmailContext) -> str:
    if context.email_id != get_setting("COMPLETED_EMAIL_ID") or not tracking.is_complete:
        return ""
    return format_tracking(tracking.number, tracking.link, context.mode)


def tracking_page_section(tracking: TrackingInfo) -> str:
    if not tracking.is_complete:
        return ""
    fragment = format_tracking(tracking.number, tracking.link, RenderMode.RICH)
    if not fragment:
        return ""
    return render_to_string(
        "order_tracking/order_details_section.html",
        {"fragment": fragment, "section_class": SECTION_CSS_CLASS},
    )
