# cfdi_extractor/validation/__init__.py

from .reconciler import MonetaryReconciler

__all__ = [
    'MonetaryReconciler',
]
