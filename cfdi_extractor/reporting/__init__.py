# cfdi_extractor/reporting/__init__.py
"""
Módulo reporting - Proyección de signo, catálogos y filas de reporte.
"""
from cfdi_extractor.reporting.display import project
from cfdi_extractor.reporting.catalogs import (
    format_currency,
    load_catalogs,
    month_label,
    tipo_comprobante_text,
    forma_pago_text,
    metodo_pago_text,
    uso_cfdi_text,
    regimen_fiscal_text
)
from cfdi_extractor.reporting.rows import (
    summary_rows,
    monthly_rows,
    type_rows,
    invoice_rows,
    concept_rows
)

__all__ = [
    # Display
    'project',

    # Catalogs
    'format_currency',
    'load_catalogs',
    'month_label',
    'tipo_comprobante_text',
    'forma_pago_text',
    'metodo_pago_text',
    'uso_cfdi_text',
    'regimen_fiscal_text',

    # Rows
    'summary_rows',
    'monthly_rows',
    'type_rows',
    'invoice_rows',
    'concept_rows',
]
