# cfdi_extractor/extraction/__init__.py
"""
Módulo extraction - Extractores especializados de datos.

El parser completo vive en `cfdi_extractor.extraction.document_parser`.
"""
from cfdi_extractor.extraction.basic_extractor import BasicFieldExtractor, parse_fecha
from cfdi_extractor.extraction.items_extractor import ConceptosExtractor, sum_traslados
from cfdi_extractor.extraction.pagos_extractor import (
    PagosExtractor,
    PagoFragments,
    TrasladoPago
)
from cfdi_extractor.extraction.prefilter import KnownBadDocumentFilter

__all__ = [
    'BasicFieldExtractor',
    'parse_fecha',
    'ConceptosExtractor',
    'sum_traslados',
    'PagosExtractor',
    'PagoFragments',
    'TrasladoPago',
    'KnownBadDocumentFilter',
]
