"""
Extractor del complemento de pagos (Pagos 1.0 / 2.0).

Solo recolecta evidencia: montos declarados, traslados por pago y por
documento relacionado, y los totales por tasa. La decisión de qué valor
usar la toma `resolution.amount_resolver`.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from lxml import etree

from cfdi_extractor.core.attribute_reader import has_attribute, read_amount, read_text
from cfdi_extractor.core.xml_utils import find_all, find_child, find_first, has_attribute_value

EXENTO = "Exento"

# Atributos de Totales por tasa de IVA, en el orden en que se suman
BASE_BUCKETS = (
    "TotalTrasladosBaseIVA16",
    "TotalTrasladosBaseIVA8",
    "TotalTrasladosBaseIVA0",
)
IMPUESTO_BUCKETS = (
    "TotalTrasladosImpuestoIVA16",
    "TotalTrasladosImpuestoIVA8",
)
BASE_EXENTO_ATTR = "TotalTrasladosBaseIVAExento"


@dataclass(frozen=True)
class TrasladoPago:
    """Traslado dentro del complemento (TrasladoP o TrasladoDR)"""
    tipo_factor: str
    base: Decimal
    importe: Decimal


@dataclass(frozen=True)
class PagoFragments:
    """Evidencia monetaria del complemento de pagos"""
    # None cuando el complemento no trae nodo Totales
    monto_total_pagos: Optional[Decimal]
    montos_pago: Tuple[Decimal, ...]
    bases_por_tasa: Tuple[Decimal, ...]
    impuestos_por_tasa: Tuple[Decimal, ...]
    traslados_p: Tuple[TrasladoPago, ...]
    traslados_dr: Tuple[TrasladoPago, ...]
    exento: bool

    @property
    def tiene_totales(self) -> bool:
        return self.monto_total_pagos is not None


def has_payment_exempt_marker(root: etree._Element) -> bool:
    """Marcador de factor exento en traslados de pago o de documento relacionado."""
    return has_attribute_value(root, ("TipoFactorP", "TipoFactorDR"), EXENTO)


class PagosExtractor:
    """Construye `PagoFragments` a partir del nodo Comprobante"""

    def find_pagos(self, comprobante: etree._Element) -> Optional[etree._Element]:
        return find_first(comprobante, "Pagos")

    def extract(self, comprobante: etree._Element) -> Optional[PagoFragments]:
        """
        Extrae la evidencia del complemento de pagos.

        Args:
            comprobante: Nodo cfdi:Comprobante

        Returns:
            PagoFragments, o None si el documento no trae complemento de pagos
        """
        pagos = self.find_pagos(comprobante)
        if pagos is None:
            return None

        totales = find_child(pagos, "Totales")
        exento = has_payment_exempt_marker(comprobante)

        monto_total: Optional[Decimal] = None
        bases: Tuple[Decimal, ...] = ()
        impuestos: Tuple[Decimal, ...] = ()
        if totales is not None:
            monto_total = read_amount(totales, "MontoTotalPagos")
            bases = tuple(read_amount(totales, attr) for attr in BASE_BUCKETS)
            impuestos = tuple(read_amount(totales, attr) for attr in IMPUESTO_BUCKETS)
            if has_attribute(totales, BASE_EXENTO_ATTR):
                exento = True

        return PagoFragments(
            monto_total_pagos=monto_total,
            montos_pago=tuple(read_amount(p, "Monto") for p in find_all(pagos, "Pago")),
            bases_por_tasa=bases,
            impuestos_por_tasa=impuestos,
            traslados_p=self._traslados(pagos, "TrasladoP", "P"),
            traslados_dr=self._traslados(pagos, "TrasladoDR", "DR"),
            exento=exento,
        )

    def _traslados(self, pagos: etree._Element, tag: str, suffix: str) -> Tuple[TrasladoPago, ...]:
        return tuple(
            TrasladoPago(
                tipo_factor=read_text(node, f"TipoFactor{suffix}"),
                base=read_amount(node, f"Base{suffix}"),
                importe=read_amount(node, f"Importe{suffix}"),
            )
            for node in find_all(pagos, tag)
        )
