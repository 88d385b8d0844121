"""
Estrategias de resolución de subtotal/impuestos para comprobantes de pago.

Cada estrategia es una función pura `(fragmentos, total) -> (subtotal, impuestos)`
que devuelve None cuando no tiene evidencia suficiente. La cascada se
expresa como una lista ordenada; gana la primera que devuelve un valor.
"""
from decimal import Decimal
from typing import Callable, Optional, Sequence, Tuple

from cfdi_extractor.core.money import ZERO, round2, sum2
from cfdi_extractor.extraction.pagos_extractor import EXENTO, PagoFragments

TASA = "Tasa"

Resolution = Tuple[Decimal, Decimal]
PaymentStrategy = Callable[[PagoFragments, Decimal], Optional[Resolution]]


def exempt_strategy(fragments: PagoFragments, total: Decimal) -> Optional[Resolution]:
    """Pago exento: subtotal = total, sin impuestos."""
    if fragments.exento:
        return total, ZERO
    return None


def rate_bucket_strategy(fragments: PagoFragments, total: Decimal) -> Optional[Resolution]:
    """Suma de bases e impuestos por tasa declarados en Totales."""
    base = sum2(fragments.bases_por_tasa)
    if base > 0:
        return base, sum2(fragments.impuestos_por_tasa)
    return None


def related_document_rate_strategy(fragments: PagoFragments, total: Decimal) -> Optional[Resolution]:
    """Primer TrasladoDR con factor Tasa y base positiva."""
    for traslado in fragments.traslados_dr:
        if traslado.tipo_factor == TASA and traslado.base > 0:
            return round2(traslado.base), round2(traslado.importe)
    return None


def payment_traslados_strategy(fragments: PagoFragments, total: Decimal) -> Optional[Resolution]:
    """Suma de los TrasladoP no exentos de todos los pagos."""
    gravados = [t for t in fragments.traslados_p if t.tipo_factor != EXENTO]
    if not gravados:
        return None
    base = sum2(t.base for t in gravados)
    if base > 0:
        return base, sum2(t.importe for t in gravados)
    return None


def no_tax_strategy(fragments: PagoFragments, total: Decimal) -> Optional[Resolution]:
    """Último recurso: sin información de impuestos."""
    return total, ZERO


# Cascada cuando el complemento trae nodo Totales con MontoTotalPagos
TOTALES_STRATEGIES: Sequence[PaymentStrategy] = (
    exempt_strategy,
    rate_bucket_strategy,
    related_document_rate_strategy,
    no_tax_strategy,
)

# Cascada cuando el total se obtiene sumando el Monto de cada Pago
PAGOS_STRATEGIES: Sequence[PaymentStrategy] = (
    exempt_strategy,
    payment_traslados_strategy,
    no_tax_strategy,
)


def run_cascade(
    strategies: Sequence[PaymentStrategy],
    fragments: PagoFragments,
    total: Decimal,
) -> Resolution:
    """Aplica las estrategias en orden y devuelve la primera resolución."""
    for strategy in strategies:
        result = strategy(fragments, total)
        if result is not None:
            return result
    return total, ZERO
