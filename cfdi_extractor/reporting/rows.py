"""
Proyecciones tabulares del Dataset para los colaboradores de exportación
(hojas de cálculo, PDF). Cada función devuelve filas: la primera es el
encabezado y los montos se entregan como Decimal, sin formatear.
"""
from typing import Any, List

from cfdi_extractor.models.cfdi_types import Dataset, DocumentType, GlobalSummary
from cfdi_extractor.reporting.catalogs import (
    forma_pago_text,
    metodo_pago_text,
    month_label,
    tipo_comprobante_text,
    uso_cfdi_text,
)

Row = List[Any]


def _date_or_blank(value) -> str:
    return value.isoformat() if value is not None else ""


def summary_rows(summary: GlobalSummary) -> List[Row]:
    """Hoja 'Resumen': conteos, totales por tipo y balance final"""
    return [
        ["Concepto", "Valor"],
        ["Período inicial", _date_or_blank(summary.date_range.min_date)],
        ["Período final", _date_or_blank(summary.date_range.max_date)],
        ["Total de Facturas", summary.invoice_count],
        ["Facturas de Ingreso", summary.ingresos_count],
        ["Facturas de Egreso", summary.egresos_count],
        ["Comprobantes de Pago", summary.pagos_count],
        ["Total de Ingresos", summary.ingresos_total],
        ["Total de Egresos", summary.egresos_total],
        ["Total de Pagos", summary.pagos_total],
        ["Subtotal", summary.total_subtotal],
        ["Impuestos", summary.total_taxes],
        ["Total", summary.total_amount],
    ]


def monthly_rows(summary: GlobalSummary) -> List[Row]:
    """Hoja 'Por Mes' en orden cronológico"""
    rows: List[Row] = [
        ["Mes", "Cantidad de Facturas", "Ingresos (I)", "Egresos (E)", "Pagos (P)", "Impuestos", "Total"],
    ]
    for month_key in sorted(summary.by_month):
        data = summary.by_month[month_key]
        rows.append([
            month_label(month_key),
            data.count,
            data.ingresos,
            data.egresos,
            data.pagos,
            data.taxes,
            data.total,
        ])
    return rows


def type_rows(summary: GlobalSummary) -> List[Row]:
    """Hoja 'Por Tipo' (montos con signo)"""
    rows: List[Row] = [["Tipo de Comprobante", "Cantidad de Facturas", "Subtotal", "Impuestos", "Total"]]
    for tipo, data in summary.by_tipo.items():
        rows.append([
            f"{tipo_comprobante_text(tipo)} ({tipo})",
            data.count,
            data.subtotal,
            data.taxes,
            data.total,
        ])
    return rows


def invoice_rows(dataset: Dataset) -> List[Row]:
    """Hoja 'Facturas': un renglón por documento, ordenado por fecha"""
    rows: List[Row] = [[
        "UUID", "Folio", "Serie", "Fecha", "Emisor", "RFC Emisor", "Receptor", "RFC Receptor",
        "Tipo", "Forma de Pago", "Método de Pago", "Uso CFDI", "Subtotal", "Impuestos", "Total",
    ]]
    for doc in sorted(dataset.documents, key=lambda d: d.fecha):
        rows.append([
            doc.uuid,
            doc.folio,
            doc.serie,
            doc.fecha.isoformat(),
            doc.emisor.nombre,
            doc.emisor.rfc,
            doc.receptor.nombre,
            doc.receptor.rfc,
            tipo_comprobante_text(doc.comprobante.tipo_comprobante),
            forma_pago_text(doc.comprobante.forma_pago),
            metodo_pago_text(doc.comprobante.metodo_pago),
            uso_cfdi_text(doc.receptor.uso_cfdi),
            doc.display.subtotal,
            doc.display.impuestos,
            doc.display.total,
        ])
    return rows


def concept_rows(dataset: Dataset) -> List[Row]:
    """Hoja 'Conceptos': importe e impuestos negativos para egresos"""
    rows: List[Row] = [[
        "UUID", "Fecha", "Tipo", "Clave Prod/Serv", "Clave Unidad", "Unidad", "Descripción",
        "Cantidad", "Valor Unitario", "Importe", "Impuestos",
    ]]
    for doc in dataset.documents:
        egreso = doc.document_type is DocumentType.EGRESO
        for concepto in doc.conceptos:
            rows.append([
                doc.uuid,
                doc.fecha.isoformat(),
                tipo_comprobante_text(doc.comprobante.tipo_comprobante),
                concepto.clave_prod_serv,
                concepto.clave_unidad,
                concepto.unidad,
                concepto.descripcion,
                concepto.cantidad,
                concepto.valor_unitario,
                -abs(concepto.importe) if egreso else concepto.importe,
                -abs(concepto.impuestos) if egreso else concepto.impuestos,
            ])
    return rows
