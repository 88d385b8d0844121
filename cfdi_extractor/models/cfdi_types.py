"""
Tipos y estructuras de datos para comprobantes fiscales (CFDI).
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from cfdi_extractor.core.exceptions import FailureReason

ZERO = Decimal("0.00")


class DocumentType(Enum):
    """Tipo de comprobante (atributo TipoDeComprobante)"""
    INGRESO = "I"
    EGRESO = "E"
    PAGO = "P"
    TRASLADO = "T"
    NOMINA = "N"
    OTRO = "OTRO"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "DocumentType":
        """Convierte el código del XML; códigos desconocidos son OTRO."""
        normalized = (code or "").strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.OTRO


@dataclass(frozen=True)
class ReconciliationWarning:
    """
    Señal de diagnóstico: subtotal + impuestos no cuadró con el total antes
    de la corrección. No es un error ni se muestra al usuario.
    """
    etapa: str  # 'documento', 'agregado_total', 'agregado_impuestos'
    esperado: Decimal
    calculado: Decimal
    diferencia: Decimal
    mensaje: str = ""


@dataclass(frozen=True)
class Concepto:
    """Línea (concepto) de un comprobante"""
    descripcion: str
    valor_unitario: Decimal
    importe: Decimal
    cantidad: Decimal
    impuestos: Decimal = ZERO
    clave_prod_serv: str = ""
    clave_unidad: str = ""
    unidad: str = ""


@dataclass(frozen=True)
class TimbreFiscal:
    """Datos del Timbre Fiscal Digital"""
    uuid: str
    fecha_timbrado: str = ""


@dataclass(frozen=True)
class Emisor:
    rfc: str
    nombre: str
    regimen_fiscal: str


@dataclass(frozen=True)
class Receptor:
    rfc: str
    nombre: str
    uso_cfdi: str
    domicilio_fiscal: str = ""


@dataclass(frozen=True)
class ComprobanteInfo:
    """Atributos de clasificación del nodo Comprobante"""
    tipo_comprobante: str
    moneda: str = ""
    tipo_cambio: Decimal = Decimal("1")
    forma_pago: str = ""
    metodo_pago: str = ""
    exportacion: str = ""

    @property
    def document_type(self) -> DocumentType:
        return DocumentType.from_code(self.tipo_comprobante)


@dataclass(frozen=True)
class ResolvedAmounts:
    """Terna autoritativa (total, subtotal, impuestos) de un documento"""
    total: Decimal
    subtotal: Decimal
    impuestos: Decimal
    # Caso exento conocido: se relaja la identidad subtotal + impuestos = total
    exento: bool = False
    advertencias: Tuple[ReconciliationWarning, ...] = ()


@dataclass(frozen=True)
class DisplayAmounts:
    """Montos con signo para reportes (los egresos se muestran negativos)"""
    total: Decimal
    subtotal: Decimal
    impuestos: Decimal
    prefix: str = ""


@dataclass(frozen=True)
class ParsedDocument:
    """Registro normalizado de un CFDI"""
    nombre_archivo: str
    uuid: str
    fecha: datetime
    emisor: Emisor
    receptor: Receptor
    comprobante: ComprobanteInfo
    montos: ResolvedAmounts
    display: DisplayAmounts
    conceptos: Tuple[Concepto, ...] = ()
    serie: str = ""
    folio: str = ""
    fecha_timbrado: str = ""

    @property
    def document_type(self) -> DocumentType:
        return self.comprobante.document_type

    @property
    def total(self) -> Decimal:
        return self.montos.total

    @property
    def subtotal(self) -> Decimal:
        return self.montos.subtotal

    @property
    def impuestos(self) -> Decimal:
        return self.montos.impuestos

    @property
    def month_key(self) -> str:
        return f"{self.fecha.year:04d}-{self.fecha.month:02d}"

    @property
    def fecha_calendario(self) -> date:
        return self.fecha.date()


@dataclass(frozen=True)
class ParseFailure:
    """Documento descartado y el motivo"""
    nombre_archivo: str
    motivo: FailureReason
    mensaje: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nombre_archivo": self.nombre_archivo,
            "motivo": self.motivo.value,
            "mensaje": self.mensaje,
        }


@dataclass(frozen=True)
class MonthlySummary:
    """Resumen por mes (YYYY-MM)"""
    count: int = 0
    total: Decimal = ZERO
    taxes: Decimal = ZERO
    subtotal: Decimal = ZERO
    ingresos: Decimal = ZERO
    egresos: Decimal = ZERO
    pagos: Decimal = ZERO
    ingreso_count: int = 0
    egreso_count: int = 0
    pago_count: int = 0
    other_count: int = 0


@dataclass(frozen=True)
class TypeSummary:
    """Resumen por tipo de comprobante (con signo)"""
    count: int = 0
    total: Decimal = ZERO
    taxes: Decimal = ZERO
    subtotal: Decimal = ZERO


@dataclass(frozen=True)
class DateRange:
    # None cuando no hubo documentos
    min_date: Optional[date] = None
    max_date: Optional[date] = None


@dataclass(frozen=True)
class GlobalSummary:
    """Resumen global de una corrida de agregación"""
    total_amount: Decimal = ZERO
    total_taxes: Decimal = ZERO
    total_subtotal: Decimal = ZERO
    invoice_count: int = 0
    ingresos_count: int = 0
    egresos_count: int = 0
    pagos_count: int = 0
    ingresos_total: Decimal = ZERO
    egresos_total: Decimal = ZERO
    pagos_total: Decimal = ZERO
    date_range: DateRange = field(default_factory=DateRange)
    by_month: Mapping[str, MonthlySummary] = field(default_factory=dict)
    by_tipo: Mapping[str, TypeSummary] = field(default_factory=dict)
    advertencias: Tuple[ReconciliationWarning, ...] = ()


@dataclass(frozen=True)
class Dataset:
    """Raíz inmutable: documentos procesados + resumen global"""
    documents: Tuple[ParsedDocument, ...]
    summary: GlobalSummary
