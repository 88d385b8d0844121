"""
Extractor de campos básicos de un CFDI: identificación, partes y timbre.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from lxml import etree

from cfdi_extractor.core.attribute_reader import read_amount, read_raw, read_text
from cfdi_extractor.core.exceptions import UnexpectedDocumentError
from cfdi_extractor.core.xml_utils import find_first
from cfdi_extractor.models.cfdi_types import ComprobanteInfo, Emisor, Receptor, TimbreFiscal


def parse_fecha(raw: Optional[str]) -> datetime:
    """
    Convierte el atributo Fecha (ISO-8601) a datetime sin zona horaria.

    Raises:
        UnexpectedDocumentError: si la fecha falta o no es legible
    """
    if not raw:
        raise UnexpectedDocumentError("El comprobante no tiene atributo Fecha")
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        fecha = datetime.fromisoformat(text)
    except ValueError:
        raise UnexpectedDocumentError(f"Fecha ilegible: {raw!r}")
    # Fecha de CFDI es hora local del emisor; se descarta el offset
    return fecha.replace(tzinfo=None)


class BasicFieldExtractor:
    """Extrae campos básicos de identificación y partes del comprobante"""

    def extract_emisor(self, emisor_node: etree._Element) -> Emisor:
        return Emisor(
            rfc=read_text(emisor_node, "Rfc"),
            nombre=read_text(emisor_node, "Nombre"),
            regimen_fiscal=read_text(emisor_node, "RegimenFiscal"),
        )

    def extract_receptor(self, receptor_node: etree._Element) -> Receptor:
        return Receptor(
            rfc=read_text(receptor_node, "Rfc"),
            nombre=read_text(receptor_node, "Nombre"),
            uso_cfdi=read_text(receptor_node, "UsoCFDI"),
            domicilio_fiscal=read_text(receptor_node, "DomicilioFiscalReceptor"),
        )

    def extract_comprobante_info(self, comprobante: etree._Element) -> ComprobanteInfo:
        """Tipo, moneda y forma/método de pago (TipoCambio por defecto 1)"""
        return ComprobanteInfo(
            tipo_comprobante=read_text(comprobante, "TipoDeComprobante"),
            moneda=read_text(comprobante, "Moneda"),
            tipo_cambio=read_amount(comprobante, "TipoCambio", default=Decimal("1")),
            forma_pago=read_text(comprobante, "FormaPago"),
            metodo_pago=read_text(comprobante, "MetodoPago"),
            exportacion=read_text(comprobante, "Exportacion"),
        )

    def extract_fecha(self, comprobante: etree._Element) -> datetime:
        return parse_fecha(read_raw(comprobante, "Fecha"))

    def extract_timbre(self, comprobante: etree._Element) -> Optional[TimbreFiscal]:
        """
        Extrae el Timbre Fiscal Digital.

        Returns:
            TimbreFiscal, o None si el documento no está timbrado
        """
        timbre = find_first(comprobante, "TimbreFiscalDigital")
        if timbre is None:
            return None
        return TimbreFiscal(
            uuid=read_text(timbre, "UUID"),
            fecha_timbrado=read_text(timbre, "FechaTimbrado"),
        )
