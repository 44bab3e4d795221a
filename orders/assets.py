# orders/assets.py
from dataclasses import dataclass

from django.templatetags.static import static

ACCOUNT_PAGE = "account"


@dataclass(frozen=True)
class StyleAsset:
    """Hoja de estilo que un plugin pide incluir en una página."""

    handle: str
    path: str
    version: str = ""

    @property
    def href(self) -> str:
        url = static(self.path)
        return f"{url}?ver={self.version}" if self.version else url
