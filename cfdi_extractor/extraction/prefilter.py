"""
Pre-filtro de complementos de pago mal formados.

Algunos emisores generan comprobantes de pago con SubTotal=0, Total=0,
moneda XXX, factor exento y montos relacionados muy grandes. Sus totales
se contradicen entre sí, por lo que el documento se excluye completo.
"""
from typing import Optional

from lxml import etree

from cfdi_extractor.core.attribute_reader import has_attribute, read_amount, read_text
from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.xml_utils import find_all, find_child, find_first
from cfdi_extractor.extraction.pagos_extractor import BASE_EXENTO_ATTR, has_payment_exempt_marker
from cfdi_extractor.models.cfdi_types import DocumentType
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("PreFilter")


class KnownBadDocumentFilter:

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

    def matches(self, comprobante: etree._Element) -> bool:
        """True si el comprobante debe rechazarse como KnownBadDocument."""
        if DocumentType.from_code(read_text(comprobante, "TipoDeComprobante")) is not DocumentType.PAGO:
            return False
        if not self._declares_zero(comprobante, "SubTotal") or not self._declares_zero(comprobante, "Total"):
            return False
        if read_text(comprobante, "Moneda").upper() not in self.settings.PLACEHOLDER_CURRENCIES:
            return False

        pagos = find_first(comprobante, "Pagos")
        if pagos is None or not has_payment_exempt_marker(comprobante):
            return False

        threshold = self.settings.KNOWN_BAD_THRESHOLD
        for docto in find_all(pagos, "DoctoRelacionado"):
            saldo_anterior = read_amount(docto, "ImpSaldoAnt")
            pagado = read_amount(docto, "ImpPagado")
            if saldo_anterior > threshold and pagado > threshold:
                logger.warning(
                    "Pago exento con montos relacionados grandes "
                    f"(ImpSaldoAnt={saldo_anterior}, ImpPagado={pagado})"
                )
                return True

        totales = find_child(pagos, "Totales")
        if totales is not None:
            base_exenta = read_amount(totales, BASE_EXENTO_ATTR)
            if base_exenta > threshold:
                logger.warning(f"Pago con base exenta grande ({BASE_EXENTO_ATTR}={base_exenta})")
                return True

        return False

    @staticmethod
    def _declares_zero(node: etree._Element, attr: str) -> bool:
        if not has_attribute(node, attr):
            return False
        return read_amount(node, attr, default=None) == 0
