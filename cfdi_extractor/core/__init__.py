# cfdi_extractor/core/__init__.py

"""
Módulo core - Componentes fundamentales del sistema.
"""
from cfdi_extractor.core.xml_utils import (
    safe_parse_xml,
    find_first,
    find_all,
    find_children,
    find_comprobante,
    has_attribute_value,
    CFDI_NAMESPACES
)
from cfdi_extractor.core.attribute_reader import (
    read_raw,
    read_amount,
    read_text,
    parse_amount
)
from cfdi_extractor.core.money import round2, add2, differs, ZERO
from cfdi_extractor.core.config import EngineSettings, get_settings
from cfdi_extractor.core.exceptions import (
    FailureReason,
    CfdiParseError,
    MissingStructureError,
    KnownBadDocumentError,
    UnexpectedDocumentError,
    EmptyBatchError
)

__all__ = [
    # XML utilities
    'safe_parse_xml',
    'find_first',
    'find_all',
    'find_children',
    'find_comprobante',
    'has_attribute_value',
    'CFDI_NAMESPACES',

    # Attribute reader
    'read_raw',
    'read_amount',
    'read_text',
    'parse_amount',

    # Money
    'round2',
    'add2',
    'differs',
    'ZERO',

    # Config
    'EngineSettings',
    'get_settings',

    # Errors
    'FailureReason',
    'CfdiParseError',
    'MissingStructureError',
    'KnownBadDocumentError',
    'UnexpectedDocumentError',
    'EmptyBatchError',
]
