# cfdi_extractor/resolution/__init__.py
"""
Módulo resolution - Resolución de montos autoritativos.
"""
from cfdi_extractor.resolution.amount_resolver import AmountResolver, assign_payment_tax
from cfdi_extractor.resolution.strategies import (
    PAGOS_STRATEGIES,
    TOTALES_STRATEGIES,
    run_cascade
)

__all__ = [
    'AmountResolver',
    'assign_payment_tax',
    'PAGOS_STRATEGIES',
    'TOTALES_STRATEGIES',
    'run_cascade',
]
