"""
Configuración central de pytest y fixtures compartidas para todos los tests.

Proporciona:
- Configuración del motor aislada del entorno (sin .env)
- Constructores de XML CFDI 4.0 y complemento de pagos 2.0
- Parser de documentos listo para usar
- Documentos ya resueltos para agregación y reportes
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

import pytest

from cfdi_extractor.core.config import EngineSettings
from cfdi_extractor.extraction.document_parser import DocumentParser
from cfdi_extractor.models.cfdi_types import (
    ComprobanteInfo,
    DocumentType,
    Emisor,
    ParsedDocument,
    Receptor,
    ResolvedAmounts,
)
from cfdi_extractor.reporting.display import project

CFDI_NS = "http://www.sat.gob.mx/cfd/4"
CFDI33_NS = "http://www.sat.gob.mx/cfd/3"
PAGO20_NS = "http://www.sat.gob.mx/Pagos20"
TFD_NS = "http://www.sat.gob.mx/TimbreFiscalDigital"


def _attrs(values: Dict[str, str]) -> str:
    return " ".join(f'{k}="{v}"' for k, v in values.items())


# ==================== CONSTRUCTORES DE XML ====================

def concepto_xml(
    descripcion: str = "Servicio",
    importe: str = "100.00",
    cantidad: str = "1",
    traslados: Iterable[Tuple[str, Optional[str]]] = (("Tasa", "16.00"),),
    clave_prod_serv: str = "81111500",
) -> str:
    """Concepto con traslados (TipoFactor, Importe); Importe None para exentos."""
    traslados = list(traslados)
    impuestos = ""
    if traslados:
        items = []
        for factor, monto in traslados:
            attrs = {"Base": importe, "Impuesto": "002", "TipoFactor": factor}
            if monto is not None:
                attrs["TasaOCuota"] = "0.160000"
                attrs["Importe"] = monto
            items.append(f"<cfdi:Traslado {_attrs(attrs)}/>")
        impuestos = f"<cfdi:Impuestos><cfdi:Traslados>{''.join(items)}</cfdi:Traslados></cfdi:Impuestos>"
    return (
        f'<cfdi:Concepto ClaveProdServ="{clave_prod_serv}" Cantidad="{cantidad}" ClaveUnidad="E48" '
        f'Unidad="Servicio" Descripcion="{descripcion}" ValorUnitario="{importe}" Importe="{importe}" '
        f'ObjetoImp="02">{impuestos}</cfdi:Concepto>'
    )


def cfdi_xml(
    tipo: str = "I",
    total: str = "116.00",
    subtotal: str = "100.00",
    moneda: str = "MXN",
    fecha: str = "2024-03-15T10:30:00",
    conceptos: Optional[str] = None,
    impuestos: str = "",
    complemento: str = "",
    uuid: Optional[str] = "6F1E2A7C-1111-4A2B-9C3D-000000000001",
    serie: str = "A",
    folio: str = "100",
    emisor: bool = True,
    receptor: bool = True,
    ns: str = CFDI_NS,
) -> bytes:
    """Comprobante CFDI completo como bytes."""
    if conceptos is None:
        conceptos = concepto_xml()
    timbre = ""
    if uuid:
        timbre = (
            f'<tfd:TimbreFiscalDigital Version="1.1" UUID="{uuid}" '
            f'FechaTimbrado="{fecha}"/>'
        )
    fecha_attr = f'Fecha="{fecha}" ' if fecha else ""
    emisor_xml = (
        '<cfdi:Emisor Rfc="AAA010101AAA" Nombre="EMISOR DEMO" RegimenFiscal="601"/>' if emisor else ""
    )
    receptor_xml = (
        '<cfdi:Receptor Rfc="XAXX010101000" Nombre="RECEPTOR DEMO" UsoCFDI="G03" '
        'DomicilioFiscalReceptor="01000" RegimenFiscalReceptor="616"/>' if receptor else ""
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<cfdi:Comprobante xmlns:cfdi="{ns}" xmlns:pago20="{PAGO20_NS}" xmlns:tfd="{TFD_NS}" '
        f'Version="4.0" Serie="{serie}" Folio="{folio}" {fecha_attr}'
        f'SubTotal="{subtotal}" Total="{total}" Moneda="{moneda}" TipoDeComprobante="{tipo}" '
        f'FormaPago="03" MetodoPago="PUE" Exportacion="01" LugarExpedicion="01000">'
        f"{emisor_xml}{receptor_xml}"
        f"<cfdi:Conceptos>{conceptos}</cfdi:Conceptos>"
        f"{impuestos}"
        f"<cfdi:Complemento>{complemento}{timbre}</cfdi:Complemento>"
        "</cfdi:Comprobante>"
    ).encode("utf-8")


def traslado_dr_xml(factor: str = "Tasa", base: str = "0", importe: str = "0") -> str:
    return (
        f'<pago20:TrasladoDR BaseDR="{base}" ImpuestoDR="002" TipoFactorDR="{factor}" '
        f'TasaOCuotaDR="0.160000" ImporteDR="{importe}"/>'
    )


def traslado_p_xml(factor: str = "Tasa", base: str = "0", importe: str = "0") -> str:
    return (
        f'<pago20:TrasladoP BaseP="{base}" ImpuestoP="002" TipoFactorP="{factor}" '
        f'TasaOCuotaP="0.160000" ImporteP="{importe}"/>'
    )


def docto_xml(saldo_anterior: str = "1000", pagado: str = "1000", traslados_dr: str = "") -> str:
    impuestos = ""
    if traslados_dr:
        impuestos = f"<pago20:ImpuestosDR><pago20:TrasladosDR>{traslados_dr}</pago20:TrasladosDR></pago20:ImpuestosDR>"
    return (
        f'<pago20:DoctoRelacionado IdDocumento="AAAAAAAA-0000-0000-0000-000000000001" MonedaDR="MXN" '
        f'NumParcialidad="1" ImpSaldoAnt="{saldo_anterior}" ImpPagado="{pagado}" ImpSaldoInsoluto="0" '
        f'ObjetoImpDR="02">{impuestos}</pago20:DoctoRelacionado>'
    )


def pago_xml(monto: str = "1000", doctos: str = "", traslados_p: str = "") -> str:
    impuestos = ""
    if traslados_p:
        impuestos = f"<pago20:ImpuestosP><pago20:TrasladosP>{traslados_p}</pago20:TrasladosP></pago20:ImpuestosP>"
    return (
        f'<pago20:Pago FechaPago="2024-03-20T12:00:00" FormaDePagoP="03" MonedaP="MXN" TipoCambioP="1" '
        f'Monto="{monto}">{doctos}{impuestos}</pago20:Pago>'
    )


def pagos_xml(pagos: str, totales: Optional[Dict[str, str]] = None) -> str:
    totales_xml = f"<pago20:Totales {_attrs(totales)}/>" if totales is not None else ""
    return f'<pago20:Pagos Version="2.0">{totales_xml}{pagos}</pago20:Pagos>'


def payment_cfdi_xml(complemento: str, **kwargs) -> bytes:
    """Comprobante de pago (tipo P) con concepto 'Pago' y montos en cero."""
    defaults = dict(
        tipo="P",
        total="0",
        subtotal="0",
        moneda="XXX",
        conceptos=concepto_xml(descripcion="Pago", importe="0", traslados=(), clave_prod_serv="84111506"),
    )
    defaults.update(kwargs)
    return cfdi_xml(complemento=complemento, **defaults)


# ==================== FIXTURES GLOBALES ====================

@pytest.fixture
def settings():
    """Configuración por defecto, sin leer .env del entorno."""
    return EngineSettings(_env_file=None)


@pytest.fixture
def parser(settings):
    return DocumentParser(settings)


def make_doc(tipo="I", total="116.00", subtotal="100.00", impuestos="16.00",
             fecha=datetime(2024, 3, 15), nombre="doc.xml") -> ParsedDocument:
    """Documento ya resuelto, sin pasar por XML (para agregación y reportes)."""
    montos = ResolvedAmounts(Decimal(total), Decimal(subtotal), Decimal(impuestos))
    return ParsedDocument(
        nombre_archivo=nombre,
        uuid=nombre,
        fecha=fecha,
        emisor=Emisor("AAA010101AAA", "EMISOR", "601"),
        receptor=Receptor("XAXX010101000", "RECEPTOR", "G03"),
        comprobante=ComprobanteInfo(tipo_comprobante=tipo),
        montos=montos,
        display=project(montos, DocumentType.from_code(tipo)),
    )
