# orders/features.py
"""Registro de compatibilidad que los plugins declaran al arrancar."""
CUSTOM_ORDER_TABLES = "custom_order_tables"

_declarations: dict[str, dict[str, bool]] = {}


def declare_compatibility(feature: str, app_label: str, compatible: bool = True) -> None:
    _declarations.setdefault(feature, {})[app_label] = bool(compatible)


def is_compatible(feature: str, app_label: str) -> bool | None:
    """None si el plugin no declaró nada para la feature."""
    return _declarations.get(feature, {}).get(app_label)


def declarations(feature: str) -> dict[str, bool]:
    return dict(_declarations.get(feature, {}))
