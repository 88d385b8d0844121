# cfdi_extractor/models/__init__.py

"""
Módulo models - Tipos de datos y estructuras.
"""
from cfdi_extractor.models.cfdi_types import (
    DocumentType,
    ReconciliationWarning,
    Concepto,
    TimbreFiscal,
    Emisor,
    Receptor,
    ComprobanteInfo,
    ResolvedAmounts,
    DisplayAmounts,
    ParsedDocument,
    ParseFailure,
    MonthlySummary,
    TypeSummary,
    DateRange,
    GlobalSummary,
    Dataset
)

__all__ = [
    'DocumentType',
    'ReconciliationWarning',
    'Concepto',
    'TimbreFiscal',
    'Emisor',
    'Receptor',
    'ComprobanteInfo',
    'ResolvedAmounts',
    'DisplayAmounts',
    'ParsedDocument',
    'ParseFailure',
    'MonthlySummary',
    'TypeSummary',
    'DateRange',
    'GlobalSummary',
    'Dataset',
]
