import json

class BadJSON(Exception):
    """Se lanza cuando el cuerpo no es JSON válido."""
    pass


class InvalidStatus(Exception):
    """Se lanza cuando la transición de estado no es válida."""
    pass


class VersionConflict(Exception):
    """Se lanza cuando la versión esperada no coincide (control optimista)."""
    pass


class HookError(Exception):
    """Base para los errores que los plugins lanzan desde un hook de la orden."""
    pass


def parse_json_body(request):
    """
    Intenta decodificar el body del request como JSON y retorna un dict.
    Lanza BadJSON si falla o si el JSON no es un objeto.
    """
    try:
        body = request.body.decode("utf-8") if request.body else "{}"
        data = json.loads(body or "{}")
    except Exception as e:
        raise BadJSON(f"JSON inválido: {e}")
    if not isinstance(data, dict):
        raise BadJSON("Se esperaba un objeto JSON")
    return data


# Ciclo de vida de la orden (los estados terminales no tienen salida)
_ALLOWED_TRANSITIONS = {
    "pending":    {"processing", "on-hold", "completed", "cancelled", "failed"},
    "processing": {"on-hold", "completed", "cancelled", "refunded", "failed"},
    "on-hold":    {"pending", "processing", "completed", "cancelled", "failed"},
    "completed":  {"refunded"},
    "failed":     {"pending", "processing", "on-hold", "cancelled"},
    "cancelled":  set(),
    "refunded":   set(),
}


def validate_status_transition(current_status: str | None, new_status: str) -> bool:
    """
    Valida que el cambio de estado sea válido.
    - Si current_status es None, siempre permite (caso de creación).
    - Quedarse en el mismo estado no es una transición y se permite.
    - Lanza InvalidStatus si la transición no está permitida.
    """
    if not isinstance(new_status, str) or new_status not in _ALLOWED_TRANSITIONS:
        raise InvalidStatus(f"Estado desconocido: {new_status}")
    if current_status is None or current_status == new_status:
        return True

    allowed = _ALLOWED_TRANSITIONS.get(current_status, set())
    if new_status not in allowed:
        raise InvalidStatus(f"No permitido pasar de {current_status} a {new_status}")
    return True
