# Utilidades del paquete
from .logger import get_logger, logger, set_level

__all__ = [
    "get_logger",
    "logger",
    "set_level",
]
