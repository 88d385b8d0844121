"""
Aritmética monetaria con Decimal.

Todo redondeo del motor es ROUND_HALF_UP a dos decimales y se aplica
después de cada suma, para que el resultado de miles de documentos no
dependa del orden de acumulación.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

ZERO = Decimal("0.00")
TWO_PLACES = Decimal("0.01")


def round2(value) -> Decimal:
    """Redondea a dos decimales (mitad hacia arriba)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def add2(*values) -> Decimal:
    """Suma redondeando después de cada operación."""
    total = ZERO
    for value in values:
        total = round2(total + value)
    return total


def sum2(values: Iterable[Decimal]) -> Decimal:
    return add2(*values)


def differs(a: Decimal, b: Decimal, tolerance: Decimal) -> bool:
    """True si |a - b| excede la tolerancia."""
    return abs(a - b) > tolerance
