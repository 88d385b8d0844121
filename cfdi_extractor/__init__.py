# cfdi_extractor/__init__.py
"""
cfdi_extractor - Extracción, resolución de montos y agregación de CFDI.
"""
from cfdi_extractor.extraction.document_parser import DocumentParser, parse_document
from cfdi_extractor.aggregation.aggregator import aggregate
from cfdi_extractor.facade.batch_processor import CfdiBatchProcessor, RunResult

__version__ = "1.0.0"

__all__ = [
    'DocumentParser',
    'parse_document',
    'aggregate',
    'CfdiBatchProcessor',
    'RunResult',
]
