"""
Catálogos del SAT para etiquetas legibles y formato de moneda.

Los catálogos son datos estáticos empaquetados en `data/catalogos.json`;
CFDI_CATALOG_PATH permite sustituirlos por un archivo propio.
"""
import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from cfdi_extractor.core.config import get_settings
from cfdi_extractor.core.money import round2
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("Catalogs")

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalogos.json"

CATALOG_KEYS = ("tipo_comprobante", "forma_pago", "metodo_pago", "uso_cfdi", "regimen_fiscal", "meses")


@lru_cache(maxsize=4)
def load_catalogs(path: Optional[Path] = None) -> Dict[str, Dict[str, str]]:
    """
    Carga los catálogos desde JSON.

    Args:
        path: Archivo alterno; por defecto CATALOG_PATH o el JSON empaquetado

    Returns:
        Diccionario catálogo -> {código: etiqueta}
    """
    path = Path(path or get_settings().CATALOG_PATH or DEFAULT_CATALOG_PATH)
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    missing = [key for key in CATALOG_KEYS if key not in data]
    if missing:
        logger.warning(f"Catálogo {path} sin secciones: {', '.join(missing)}")
    return {key: dict(data.get(key, {})) for key in CATALOG_KEYS}


def _label(catalog: str, code: str) -> str:
    # Código desconocido: se devuelve tal cual
    return load_catalogs().get(catalog, {}).get(code, code)


def tipo_comprobante_text(code: str) -> str:
    return _label("tipo_comprobante", code)


def forma_pago_text(code: str) -> str:
    return _label("forma_pago", code)


def metodo_pago_text(code: str) -> str:
    return _label("metodo_pago", code)


def uso_cfdi_text(code: str) -> str:
    return _label("uso_cfdi", code)


def regimen_fiscal_text(code: str) -> str:
    return _label("regimen_fiscal", code)


def month_name(month: str) -> str:
    """Nombre del mes a partir de '03' (o '2024-03')."""
    return _label("meses", month[-2:])


def month_label(month_key: str) -> str:
    """'2024-03' -> 'Marzo 2024'; claves que no son YYYY-MM se devuelven tal cual."""
    year, _, month = month_key.partition("-")
    if not year or month not in load_catalogs()["meses"]:
        return month_key
    return f"{month_name(month)} {year}"


def format_currency(amount: Decimal) -> str:
    """
    Formato de moneda MXN: '$1,234.56' y '-$400.00' para negativos.
    """
    value = round2(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
