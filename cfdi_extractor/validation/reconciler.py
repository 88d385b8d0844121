# cfdi_extractor/validation/reconciler.py

"""
Reconciliador de la identidad SUBTOTAL + IMPUESTOS = TOTAL.

Cuando la identidad no se cumple se confía en total y subtotal y el
impuesto se recalcula como la diferencia. Es una heurística heredada,
no una regla contable verificada: cada corrección deja una
ReconciliationWarning para auditoría.
"""
from decimal import Decimal
from typing import List, Optional, Tuple

from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.money import ZERO, differs, round2
from cfdi_extractor.models.cfdi_types import ReconciliationWarning
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("Reconciler")


class MonetaryReconciler:
    """
    Valida y corrige la consistencia de una terna monetaria.

    Tolerancia: RECONCILIATION_TOLERANCE (0.10 por defecto).
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

    @property
    def tolerance(self) -> Decimal:
        return self.settings.RECONCILIATION_TOLERANCE

    def check(
        self,
        subtotal: Decimal,
        impuestos: Decimal,
        total: Decimal,
        etapa: str = "documento",
        documento_id: str = "UNKNOWN",
    ) -> Optional[ReconciliationWarning]:
        """
        Compara subtotal + impuestos contra total.

        Returns:
            ReconciliationWarning si la diferencia excede la tolerancia, None si cuadra
        """
        calculado = round2(subtotal + impuestos)
        if not differs(calculado, total, self.tolerance):
            return None

        diferencia = round2(abs(calculado - total))
        mensaje = (
            f"Inconsistencia: subtotal {subtotal} + impuestos {impuestos} = {calculado} "
            f"vs total {total}"
        )
        logger.warning(f"[{documento_id}] {mensaje}")
        return ReconciliationWarning(
            etapa=etapa,
            esperado=total,
            calculado=calculado,
            diferencia=diferencia,
            mensaje=mensaje,
        )

    def backfill_tax(self, total: Decimal, subtotal: Decimal, impuestos: Decimal, exento: bool) -> Decimal:
        """Sin impuestos declarados y sin exención: impuesto = total - subtotal."""
        if not exento and impuestos == ZERO and total > 0 and subtotal > 0:
            return round2(total - subtotal)
        return impuestos

    def reconcile(
        self,
        total: Decimal,
        subtotal: Decimal,
        impuestos: Decimal,
        exento: bool,
        documento_id: str = "UNKNOWN",
    ) -> Tuple[Decimal, List[ReconciliationWarning]]:
        """
        Fuerza la identidad cuando falla y no hay exención.

        Returns:
            (impuestos corregidos, advertencias emitidas)
        """
        if exento:
            return impuestos, []
        warning = self.check(subtotal, impuestos, total, "documento", documento_id)
        if warning is None:
            return impuestos, []
        return round2(total - subtotal), [warning]
