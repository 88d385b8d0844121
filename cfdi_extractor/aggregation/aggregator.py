"""
Agregación de documentos procesados en resúmenes global, mensual y por tipo.

La agregación es un fold explícito: `AggregationAccumulator.add` devuelve un
acumulador nuevo por cada documento y `merge` combina acumuladores parciales
(por ejemplo, de lotes procesados por separado) redondeando en cada suma.

Convención de signo:
  - Totales globales y tabla por tipo: con signo (egresos restan).
  - Cubetas ingresos/egresos/pagos (globales y mensuales): egresos en magnitud
    positiva, con su propio contador.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from functools import reduce
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple

from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.money import ZERO, add2, differs, round2
from cfdi_extractor.models.cfdi_types import (
    Dataset,
    DateRange,
    DocumentType,
    GlobalSummary,
    MonthlySummary,
    ParsedDocument,
    ReconciliationWarning,
    TypeSummary,
)
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("Aggregator")

DEFAULT_TOLERANCE = Decimal("0.10")


def _signed_triple(doc: ParsedDocument, tolerance: Decimal) -> Tuple[Decimal, Decimal, Decimal, Optional[ReconciliationWarning]]:
    """
    Terna (total, subtotal, impuestos) con signo del documento.

    Si la terna no cuadra se vuelve a forzar impuestos = total - subtotal.
    """
    total, subtotal, impuestos = doc.total, doc.subtotal, doc.impuestos
    warning = None
    calculado = round2(subtotal + impuestos)
    if differs(calculado, total, tolerance):
        warning = ReconciliationWarning(
            etapa="agregado_documento",
            esperado=total,
            calculado=calculado,
            diferencia=round2(abs(calculado - total)),
            mensaje=f"{doc.nombre_archivo}: impuestos recalculados en agregación",
        )
        impuestos = round2(total - subtotal)

    sign = -1 if doc.document_type is DocumentType.EGRESO else 1
    return round2(total * sign), round2(subtotal * sign), round2(impuestos * sign), warning


def _merge_monthly(a: MonthlySummary, b: MonthlySummary) -> MonthlySummary:
    return MonthlySummary(
        count=a.count + b.count,
        total=add2(a.total, b.total),
        taxes=add2(a.taxes, b.taxes),
        subtotal=add2(a.subtotal, b.subtotal),
        ingresos=add2(a.ingresos, b.ingresos),
        egresos=add2(a.egresos, b.egresos),
        pagos=add2(a.pagos, b.pagos),
        ingreso_count=a.ingreso_count + b.ingreso_count,
        egreso_count=a.egreso_count + b.egreso_count,
        pago_count=a.pago_count + b.pago_count,
        other_count=a.other_count + b.other_count,
    )


def _merge_type(a: TypeSummary, b: TypeSummary) -> TypeSummary:
    return TypeSummary(
        count=a.count + b.count,
        total=add2(a.total, b.total),
        taxes=add2(a.taxes, b.taxes),
        subtotal=add2(a.subtotal, b.subtotal),
    )


def _merge_maps(a: Dict, b: Dict, merge_fn) -> Dict:
    merged = dict(a)
    for key, value in b.items():
        merged[key] = merge_fn(merged[key], value) if key in merged else value
    return merged


def _min_date(a: Optional[date], b: Optional[date]) -> Optional[date]:
    if a is None or b is None:
        return a or b
    return min(a, b)


def _max_date(a: Optional[date], b: Optional[date]) -> Optional[date]:
    if a is None or b is None:
        return a or b
    return max(a, b)


@dataclass(frozen=True)
class AggregationAccumulator:
    """Estado acumulado de la agregación; cada operación devuelve uno nuevo"""
    tolerance: Decimal = DEFAULT_TOLERANCE
    invoice_count: int = 0
    total: Decimal = ZERO
    taxes: Decimal = ZERO
    subtotal: Decimal = ZERO
    ingresos_total: Decimal = ZERO
    egresos_total: Decimal = ZERO
    pagos_total: Decimal = ZERO
    ingresos_count: int = 0
    egresos_count: int = 0
    pagos_count: int = 0
    by_month: Dict[str, MonthlySummary] = field(default_factory=dict)
    by_tipo: Dict[str, TypeSummary] = field(default_factory=dict)
    min_date: Optional[date] = None
    max_date: Optional[date] = None
    advertencias: Tuple[ReconciliationWarning, ...] = ()

    def add(self, doc: ParsedDocument) -> "AggregationAccumulator":
        """Incorpora un documento y devuelve el acumulador resultante."""
        return self.merge(AggregationAccumulator.of(doc, self.tolerance))

    @classmethod
    def of(cls, doc: ParsedDocument, tolerance: Decimal = DEFAULT_TOLERANCE) -> "AggregationAccumulator":
        """Acumulador de un solo documento."""
        total, subtotal, taxes, warning = _signed_triple(doc, tolerance)
        tipo = doc.document_type

        ingresos = egresos = pagos = ZERO
        counts = {"ingreso": 0, "egreso": 0, "pago": 0, "other": 0}
        if tipo is DocumentType.INGRESO:
            ingresos = total
            counts["ingreso"] = 1
        elif tipo is DocumentType.EGRESO:
            egresos = abs(total)
            counts["egreso"] = 1
        elif tipo is DocumentType.PAGO:
            pagos = total
            counts["pago"] = 1
        else:
            counts["other"] = 1

        monthly = MonthlySummary(
            count=1,
            total=total,
            taxes=taxes,
            subtotal=subtotal,
            ingresos=ingresos,
            egresos=egresos,
            pagos=pagos,
            ingreso_count=counts["ingreso"],
            egreso_count=counts["egreso"],
            pago_count=counts["pago"],
            other_count=counts["other"],
        )
        tipo_key = (doc.comprobante.tipo_comprobante or "").strip().upper() or DocumentType.OTRO.value

        return cls(
            tolerance=tolerance,
            invoice_count=1,
            total=total,
            taxes=taxes,
            subtotal=subtotal,
            ingresos_total=ingresos,
            egresos_total=egresos,
            pagos_total=pagos,
            ingresos_count=counts["ingreso"],
            egresos_count=counts["egreso"],
            pagos_count=counts["pago"],
            by_month={doc.month_key: monthly},
            by_tipo={tipo_key: TypeSummary(count=1, total=total, taxes=taxes, subtotal=subtotal)},
            min_date=doc.fecha_calendario,
            max_date=doc.fecha_calendario,
            advertencias=(warning,) if warning else (),
        )

    def merge(self, other: "AggregationAccumulator") -> "AggregationAccumulator":
        """Combina dos acumuladores; el orden solo afecta el de las advertencias."""
        return replace(
            self,
            invoice_count=self.invoice_count + other.invoice_count,
            total=add2(self.total, other.total),
            taxes=add2(self.taxes, other.taxes),
            subtotal=add2(self.subtotal, other.subtotal),
            ingresos_total=add2(self.ingresos_total, other.ingresos_total),
            egresos_total=add2(self.egresos_total, other.egresos_total),
            pagos_total=add2(self.pagos_total, other.pagos_total),
            ingresos_count=self.ingresos_count + other.ingresos_count,
            egresos_count=self.egresos_count + other.egresos_count,
            pagos_count=self.pagos_count + other.pagos_count,
            by_month=_merge_maps(self.by_month, other.by_month, _merge_monthly),
            by_tipo=_merge_maps(self.by_tipo, other.by_tipo, _merge_type),
            min_date=_min_date(self.min_date, other.min_date),
            max_date=_max_date(self.max_date, other.max_date),
            advertencias=self.advertencias + other.advertencias,
        )

    def finalize(self) -> GlobalSummary:
        """
        Conciliación final del resumen global.

        1. total = ingresos + pagos - egresos (las cubetas mandan).
        2. Si subtotal + impuestos no cuadra con el total, impuestos = total - subtotal.
        """
        advertencias: List[ReconciliationWarning] = list(self.advertencias)

        total = self.total
        computed = round2(self.ingresos_total + self.pagos_total - self.egresos_total)
        if differs(computed, total, self.tolerance):
            logger.warning(
                f"Total global acumulado {total} difiere de ingresos + pagos - egresos = {computed}"
            )
            advertencias.append(ReconciliationWarning(
                etapa="agregado_total",
                esperado=computed,
                calculado=total,
                diferencia=round2(abs(computed - total)),
                mensaje="Total global sustituido por la suma de cubetas",
            ))
        total = computed

        taxes = self.taxes
        calculado = round2(self.subtotal + taxes)
        if differs(calculado, total, self.tolerance):
            logger.warning(
                f"Subtotal {self.subtotal} + impuestos {taxes} = {calculado} no cuadra con total {total}"
            )
            advertencias.append(ReconciliationWarning(
                etapa="agregado_impuestos",
                esperado=total,
                calculado=calculado,
                diferencia=round2(abs(calculado - total)),
                mensaje="Impuestos globales recalculados como total - subtotal",
            ))
            taxes = round2(total - self.subtotal)

        return GlobalSummary(
            total_amount=total,
            total_taxes=taxes,
            total_subtotal=self.subtotal,
            invoice_count=self.invoice_count,
            ingresos_count=self.ingresos_count,
            egresos_count=self.egresos_count,
            pagos_count=self.pagos_count,
            ingresos_total=self.ingresos_total,
            egresos_total=self.egresos_total,
            pagos_total=self.pagos_total,
            date_range=DateRange(self.min_date, self.max_date),
            by_month=MappingProxyType(dict(sorted(self.by_month.items()))),
            by_tipo=MappingProxyType(dict(self.by_tipo)),
            advertencias=tuple(advertencias),
        )


def aggregate(
    documents: Iterable[ParsedDocument],
    settings: Optional[EngineSettings] = None,
) -> Dataset:
    """
    Agrega los documentos procesados en un Dataset inmutable.

    Args:
        documents: Documentos procesados (en el orden deseado para el Dataset)
        settings: Configuración (tolerancia de conciliación)

    Returns:
        Dataset con los documentos y su resumen global
    """
    settings = settings or get_settings()
    documents = tuple(documents)
    initial = AggregationAccumulator(tolerance=settings.RECONCILIATION_TOLERANCE)
    accumulator = reduce(AggregationAccumulator.add, documents, initial)
    summary = accumulator.finalize()
    logger.debug(f"Agregados {summary.invoice_count} documentos en {len(summary.by_month)} meses")
    return Dataset(documents=documents, summary=summary)
