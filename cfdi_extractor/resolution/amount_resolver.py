"""
Resolución de la terna (total, subtotal, impuestos) de un CFDI.

Comprobantes regulares (I, E, T, N, ...):
  total y subtotal declarados; impuestos del nodo Impuestos global,
  de sus traslados o, en su defecto, de los conceptos.

Comprobantes de pago (P):
  el total viene del complemento (Totales/MontoTotalPagos o la suma de
  Pago/Monto) y subtotal/impuestos de una cascada de estrategias
  (ver `resolution.strategies`).

Ambas ramas terminan con el relleno de impuestos faltantes y la
reconciliación subtotal + impuestos = total.
"""
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from lxml import etree

from cfdi_extractor.core.attribute_reader import read_amount, read_raw
from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.money import ZERO, round2, sum2
from cfdi_extractor.core.xml_utils import find_all, find_child, has_attribute_value
from cfdi_extractor.extraction.items_extractor import EXENTO, sum_traslados
from cfdi_extractor.extraction.pagos_extractor import PagosExtractor
from cfdi_extractor.models.cfdi_types import Concepto, DocumentType, ResolvedAmounts
from cfdi_extractor.resolution.strategies import (
    PAGOS_STRATEGIES,
    TOTALES_STRATEGIES,
    run_cascade,
)
from cfdi_extractor.utils.logger import get_logger
from cfdi_extractor.validation.reconciler import MonetaryReconciler

logger = get_logger("AmountResolver")

EXEMPT_FACTOR_ATTRS = ("TipoFactor", "TipoFactorP", "TipoFactorDR")


def has_exempt_marker(comprobante: etree._Element) -> bool:
    """Algún traslado del documento (global, pago o relacionado) es exento."""
    return has_attribute_value(comprobante, EXEMPT_FACTOR_ATTRS, EXENTO)


class AmountResolver:
    """
    Calcula los montos autoritativos de un documento.

    El resultado cumple subtotal + impuestos ≈ total (tolerancia 0.10)
    salvo que el documento esté marcado como exento.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()
        self.pagos_extractor = PagosExtractor()
        self.reconciler = MonetaryReconciler(self.settings)

    def resolve(
        self,
        comprobante: etree._Element,
        conceptos: Sequence[Concepto],
        documento_id: str = "UNKNOWN",
    ) -> Tuple[ResolvedAmounts, List[Concepto]]:
        """
        Resuelve los montos y, para pagos, asigna el impuesto a un concepto.

        Args:
            comprobante: Nodo cfdi:Comprobante
            conceptos: Conceptos ya extraídos
            documento_id: Identificador para logs

        Returns:
            (ResolvedAmounts, conceptos posiblemente con impuesto asignado)
        """
        tipo = DocumentType.from_code(comprobante.get("TipoDeComprobante"))
        exento = has_exempt_marker(comprobante)

        if tipo is DocumentType.PAGO:
            total, subtotal, impuestos, exento_pago = self._resolve_payment(comprobante)
            exento = exento or exento_pago
        else:
            total, subtotal, impuestos = self._resolve_regular(comprobante, conceptos)

        impuestos = self.reconciler.backfill_tax(total, subtotal, impuestos, exento)
        impuestos, advertencias = self.reconciler.reconcile(
            total, subtotal, impuestos, exento, documento_id
        )

        montos = ResolvedAmounts(
            total=total,
            subtotal=subtotal,
            impuestos=impuestos,
            exento=exento,
            advertencias=tuple(advertencias),
        )

        conceptos = list(conceptos)
        if tipo is DocumentType.PAGO:
            conceptos = assign_payment_tax(conceptos, impuestos)
        return montos, conceptos

    # ------------------------------------------------------------------
    def _resolve_regular(
        self,
        comprobante: etree._Element,
        conceptos: Sequence[Concepto],
    ) -> Tuple[Decimal, Decimal, Decimal]:
        total = round2(read_amount(comprobante, "Total"))
        subtotal = round2(read_amount(comprobante, "SubTotal"))

        impuestos_node = find_child(comprobante, "Impuestos")
        if impuestos_node is not None and read_raw(impuestos_node, "TotalImpuestosTrasladados"):
            impuestos = read_amount(impuestos_node, "TotalImpuestosTrasladados")
        elif impuestos_node is not None and find_all(impuestos_node, "Traslado"):
            impuestos = sum_traslados(impuestos_node)
        else:
            # Sin nodo global: impuestos de las líneas
            impuestos = sum2(c.impuestos for c in conceptos)

        return total, subtotal, round2(impuestos)

    def _resolve_payment(self, comprobante: etree._Element) -> Tuple[Decimal, Decimal, Decimal, bool]:
        total = round2(read_amount(comprobante, "Total"))
        subtotal = round2(read_amount(comprobante, "SubTotal"))
        impuestos = ZERO

        fragments = self.pagos_extractor.extract(comprobante)
        if fragments is None:
            logger.debug("Comprobante de pago sin complemento Pagos; se usan montos declarados")
            return total, subtotal, impuestos, False

        if fragments.tiene_totales:
            if fragments.monto_total_pagos > 0:
                total = round2(fragments.monto_total_pagos)
                subtotal, impuestos = run_cascade(TOTALES_STRATEGIES, fragments, total)
        else:
            monto = sum2(fragments.montos_pago)
            if monto > 0:
                total = monto
                subtotal, impuestos = run_cascade(PAGOS_STRATEGIES, fragments, total)

        # Verificaciones finales de pagos
        if fragments.exento:
            impuestos = ZERO
            subtotal = total
        if abs(subtotal - total) < self.settings.NEGLIGIBLE_DIFFERENCE:
            impuestos = ZERO

        return total, round2(subtotal), round2(impuestos), fragments.exento


def assign_payment_tax(conceptos: List[Concepto], impuestos: Decimal) -> List[Concepto]:
    """
    Los comprobantes de pago casi nunca desglosan impuestos por línea.
    Si ningún concepto trae impuesto y el documento sí, se asigna completo
    al único concepto, al concepto "Pago" o al primero.
    """
    if not conceptos or impuestos <= 0:
        return conceptos
    if any(c.impuestos != 0 for c in conceptos):
        return conceptos

    index = 0
    if len(conceptos) > 1:
        for i, concepto in enumerate(conceptos):
            if concepto.descripcion.strip().lower() == "pago":
                index = i
                break

    updated = list(conceptos)
    updated[index] = replace(updated[index], impuestos=impuestos)
    return updated
