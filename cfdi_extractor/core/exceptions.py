"""
Excepciones del motor de extracción CFDI.

Toda falla de un documento se recupera en la frontera del documento
(ver `extraction.document_parser.parse_document`); ninguna aborta el lote.
"""
from enum import Enum


class FailureReason(Enum):
    """Motivos de rechazo de un documento"""
    MISSING_STRUCTURE = "MissingStructure"
    KNOWN_BAD_DOCUMENT = "KnownBadDocument"
    UNEXPECTED_ERROR = "UnexpectedError"


class CfdiParseError(Exception):
    """Error base al procesar un CFDI individual."""

    reason: FailureReason = FailureReason.UNEXPECTED_ERROR

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class MissingStructureError(CfdiParseError):
    """Falta un elemento estructural obligatorio (Comprobante, Emisor, Receptor, Conceptos)."""

    reason = FailureReason.MISSING_STRUCTURE


class KnownBadDocumentError(CfdiParseError):
    """El documento coincide con el patrón de pago exento mal formado y se excluye."""

    reason = FailureReason.KNOWN_BAD_DOCUMENT


class UnexpectedDocumentError(CfdiParseError):
    """Cualquier otra falla de extracción (XML inválido, fecha ilegible, etc.)."""

    reason = FailureReason.UNEXPECTED_ERROR


class EmptyBatchError(Exception):
    """Un procesamiento solicitado explícitamente no produjo ningún documento válido."""

    def __init__(self, intentados: int):
        super().__init__(
            f"No se pudo procesar ningún CFDI ({intentados} archivos intentados)"
        )
        self.intentados = intentados
