# cfdi_extractor/aggregation/__init__.py
"""
Módulo aggregation - Resúmenes global, mensual y por tipo.
"""
from cfdi_extractor.aggregation.aggregator import AggregationAccumulator, aggregate

__all__ = [
    'AggregationAccumulator',
    'aggregate',
]
