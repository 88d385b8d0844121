"""
Parser de un CFDI individual.

Orquesta la extracción de un documento: estructura obligatoria, pre-filtro,
campos básicos, timbre, conceptos y resolución de montos. Cada documento se
procesa de forma atómica: o produce un `ParsedDocument` completo o una
`ParseFailure` con su motivo.
"""
from typing import Optional, Union

from lxml import etree

from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.exceptions import (
    CfdiParseError,
    KnownBadDocumentError,
    MissingStructureError,
    UnexpectedDocumentError,
)
from cfdi_extractor.core.xml_utils import find_child, find_comprobante, find_first, safe_parse_xml
from cfdi_extractor.extraction.basic_extractor import BasicFieldExtractor
from cfdi_extractor.extraction.items_extractor import ConceptosExtractor
from cfdi_extractor.extraction.prefilter import KnownBadDocumentFilter
from cfdi_extractor.models.cfdi_types import ParsedDocument, ParseFailure
from cfdi_extractor.reporting.display import project
from cfdi_extractor.resolution.amount_resolver import AmountResolver
from cfdi_extractor.utils.logger import get_logger

logger = get_logger("DocumentParser")

REQUIRED_NODES = ("Emisor", "Receptor", "Conceptos")


class DocumentParser:
    """
    Parser de comprobantes CFDI 3.3 / 4.0.

    Acepta el comprobante como raíz o envuelto en otro documento, con o sin
    complemento de pagos (1.0 / 2.0) y con o sin timbre fiscal.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

        # --- COMPOSICIÓN DE EXTRACTORES ---
        self.basic_extractor = BasicFieldExtractor()
        self.conceptos_extractor = ConceptosExtractor()
        self.prefilter = KnownBadDocumentFilter(self.settings)
        self.amount_resolver = AmountResolver(self.settings)

    def parse(self, raw_xml: Union[bytes, str], nombre: str = "UNKNOWN") -> ParsedDocument:
        """
        Parsea un documento completo.

        Args:
            raw_xml: Contenido XML
            nombre: Nombre del archivo (para logs y reportes)

        Returns:
            ParsedDocument con montos resueltos y proyección de signo

        Raises:
            MissingStructureError: falta Comprobante, Emisor, Receptor o Conceptos
            KnownBadDocumentError: el pre-filtro descartó el documento
            UnexpectedDocumentError: XML inválido o fecha ilegible
        """
        root = safe_parse_xml(raw_xml)
        if root is None:
            raise UnexpectedDocumentError("XML mal formado")

        # --- 1. Estructura obligatoria ---
        comprobante = find_comprobante(root)
        if comprobante is None:
            raise MissingStructureError("No se encontró el nodo Comprobante")
        nodes = {}
        for name in REQUIRED_NODES:
            node = find_child(comprobante, name)
            if node is None:
                node = find_first(comprobante, name)
            if node is None:
                raise MissingStructureError(f"No se encontró el nodo {name}")
            nodes[name] = node

        # --- 2. Pre-filtro de pagos mal formados ---
        if self.prefilter.matches(comprobante):
            raise KnownBadDocumentError(
                "Complemento de pago exento con totales contradictorios"
            )

        # --- 3. Campos básicos ---
        fecha = self.basic_extractor.extract_fecha(comprobante)
        emisor = self.basic_extractor.extract_emisor(nodes["Emisor"])
        receptor = self.basic_extractor.extract_receptor(nodes["Receptor"])
        info = self.basic_extractor.extract_comprobante_info(comprobante)

        # --- 4. Timbre (opcional) ---
        timbre = self.basic_extractor.extract_timbre(comprobante)

        # --- 5. Conceptos ---
        conceptos = self.conceptos_extractor.extract(nodes["Conceptos"])

        # --- 6. Montos ---
        montos, conceptos = self.amount_resolver.resolve(comprobante, conceptos, nombre)

        return ParsedDocument(
            nombre_archivo=nombre,
            uuid=timbre.uuid if timbre else "",
            fecha=fecha,
            emisor=emisor,
            receptor=receptor,
            comprobante=info,
            montos=montos,
            display=project(montos, info.document_type),
            conceptos=tuple(conceptos),
            serie=comprobante.get("Serie", ""),
            folio=comprobante.get("Folio", ""),
            fecha_timbrado=timbre.fecha_timbrado if timbre else "",
        )


def parse_document(
    nombre: str,
    raw_xml: Union[bytes, str],
    parser: Optional[DocumentParser] = None,
) -> Union[ParsedDocument, ParseFailure]:
    """
    Frontera de recuperación por documento: nunca lanza.

    Returns:
        ParsedDocument si el documento se procesó, ParseFailure en otro caso
    """
    parser = parser or DocumentParser()
    try:
        return parser.parse(raw_xml, nombre)
    except KnownBadDocumentError as exc:
        logger.info(f"Documento excluido por pre-filtro: {nombre} ({exc.mensaje})")
        return ParseFailure(nombre, exc.reason, exc.mensaje)
    except CfdiParseError as exc:
        logger.warning(f"Documento omitido: {nombre} [{exc.reason.value}] {exc.mensaje}")
        return ParseFailure(nombre, exc.reason, exc.mensaje)
    except (etree.LxmlError, ArithmeticError, ValueError, TypeError, AttributeError) as exc:
        logger.error(f"Error inesperado procesando {nombre}: {exc}", exc_info=True)
        wrapped = UnexpectedDocumentError(str(exc))
        return ParseFailure(nombre, wrapped.reason, wrapped.mensaje)
