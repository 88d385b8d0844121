# cfdi_extractor/modules/__init__.py

from .json_writer import DecimalEncoder, JSONWriter, dataset_to_dict

__all__ = [
    'DecimalEncoder',
    'JSONWriter',
    'dataset_to_dict',
]
