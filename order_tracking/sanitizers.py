# order_tracking/sanitizers.py
"""Limpieza de lo que escribe el administrador.

Ninguna de estas funciones lanza errores de validación: normalizan lo que
pueden y devuelven "" cuando no queda nada utilizable.
"""
import re
from urllib.parse import urlsplit

from django.utils.encoding import iri_to_uri
from django.utils.html import strip_tags

ALLOWED_SCHEMES = ("http", "https")

_OCTETS = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_URL_DISALLOWED = re.compile(r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010ffff]", re.IGNORECASE)
_ENCODED_CRLF = re.compile(r"%0[ad]", re.IGNORECASE)
# "host:8080" no es un esquema
_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*:(?!\d)", re.IGNORECASE)


def sanitize_text_field(value) -> str:
    """Texto plano de una línea: sin markup, sin octetos, espacios colapsados."""
    if value is None:
        return ""
    text = strip_tags(str(value))
    text = _OCTETS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def sanitize_url(value) -> str:
    """Normaliza un link a una URL absoluta http(s), o "" si no se puede."""
    if value is None:
        return ""
    url = str(value).strip()
    if not url:
        return ""

    url = url.replace(" ", "%20")
    url = _URL_DISALLOWED.sub("", url)
    # %0d%0a puede reaparecer al quitar una ocurrencia
    while _ENCODED_CRLF.search(url):
        url = _ENCODED_CRLF.sub("", url)

    # Relativas o solo fragmento: no hay forma de volverlas absolutas
    if not url or url.startswith(("/", "#", "?")):
        return ""
    if not _SCHEME.match(url):
        url = f"http://{url}"

    url = iri_to_uri(url)
    try:
        parts = urlsplit(url)
        parts.port  # valida el puerto
    except ValueError:
        return ""
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        return ""
    return url
