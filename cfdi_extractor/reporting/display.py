"""
Proyección de signo para presentación.

Los egresos (notas de crédito) se muestran negativos con prefijo "-";
los montos almacenados en `ResolvedAmounts` conservan su magnitud positiva.
"""
from cfdi_extractor.models.cfdi_types import DisplayAmounts, DocumentType, ResolvedAmounts

EXPENSE_PREFIX = "-"


def project(montos: ResolvedAmounts, tipo: DocumentType) -> DisplayAmounts:
    if tipo is DocumentType.EGRESO:
        return DisplayAmounts(
            total=-abs(montos.total),
            subtotal=-abs(montos.subtotal),
            impuestos=-abs(montos.impuestos),
            prefix=EXPENSE_PREFIX,
        )
    return DisplayAmounts(
        total=montos.total,
        subtotal=montos.subtotal,
        impuestos=montos.impuestos,
        prefix="",
    )
