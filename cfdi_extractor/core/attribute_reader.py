"""
Lectura segura de atributos de un nodo CFDI.

La lectura está separada en dos pasos:
1. `read_raw`: obtiene el texto tal como viene (Optional[str]).
2. `parse_amount`: función pura que convierte el texto a Decimal
   con un valor por defecto explícito.

Nunca lanza excepciones: un número ilegible no es fatal.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from lxml import etree

# Solo dígitos, puntos y comas (con signo opcional): candidato a formato "1.234,56"
COMMA_DECIMAL_PATTERN = re.compile(r"^-?[\d.,]+$")
# Literal numérico simple: 1234, -12.5, .5, 1e3
PLAIN_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
# Dígitos enteros que admite el redondeo a centavos (precisión Decimal de 28)
MAX_INTEGER_DIGITS = 26


def read_raw(node: Optional[etree._Element], attr_name: str) -> Optional[str]:
    """
    Obtiene el valor crudo de un atributo.

    Returns:
        Texto del atributo sin espacios alrededor, o None si no existe
    """
    if node is None:
        return None
    value = node.get(attr_name)
    if value is None:
        return None
    return value.strip()


def _to_decimal(text: str) -> Optional[Decimal]:
    if not PLAIN_NUMBER_PATTERN.match(text):
        return None
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value.adjusted() >= MAX_INTEGER_DIGITS:
        return None
    return value


def parse_amount(raw: Optional[str], default: Decimal = Decimal("0")) -> Decimal:
    """
    Convierte texto a Decimal.

    Si el texto contiene coma y solo dígitos/puntos/comas, los puntos se
    toman como separadores de miles y la coma como punto decimal.
    En cualquier otro caso se interpreta como literal numérico simple.

    Args:
        raw: Texto crudo (o None)
        default: Valor a devolver si el texto falta o no es numérico

    Returns:
        Decimal del valor o el valor por defecto
    """
    if raw is None:
        return default
    text = raw.strip()
    if not text:
        return default

    if COMMA_DECIMAL_PATTERN.match(text) and "," in text:
        normalized = text.replace(".", "").replace(",", ".", 1)
        value = _to_decimal(normalized)
        if value is not None:
            return value

    value = _to_decimal(text)
    return value if value is not None else default


def read_amount(
    node: Optional[etree._Element],
    attr_name: str,
    default: Decimal = Decimal("0"),
) -> Decimal:
    """Lee un atributo numérico; devuelve `default` si falta o es ilegible."""
    return parse_amount(read_raw(node, attr_name), default)


def read_text(node: Optional[etree._Element], attr_name: str, default: str = "") -> str:
    """Lee un atributo de texto; devuelve `default` si falta."""
    value = read_raw(node, attr_name)
    return value if value is not None else default


def has_attribute(node: Optional[etree._Element], attr_name: str) -> bool:
    return node is not None and node.get(attr_name) is not None
