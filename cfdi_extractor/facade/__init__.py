# cfdi_extractor/facade/__init__.py
"""
Módulo facade - Punto de entrada unificado para procesar lotes de CFDI.
"""
from cfdi_extractor.facade.batch_processor import CfdiBatchProcessor, RunResult

__all__ = [
    'CfdiBatchProcessor',
    'RunResult',
]
