# cfdi_extractor/utils/logger.py
from __future__ import annotations
import logging
import os
from logging import Logger

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
BASE_LOGGER_NAME = "cfdi_extractor"

LOG_DIR = os.getenv("CFDI_LOG_DIR")
LOG_FILE = os.path.join(LOG_DIR, "cfdi_extractor.log") if LOG_DIR else None


def _configure_base(level: str) -> Logger:
    base = logging.getLogger(BASE_LOGGER_NAME)
    if not base.handlers:
        # Handler para consola
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        base.addHandler(stream_handler)
        # Handler para archivo, solo si CFDI_LOG_DIR está definido
        if LOG_FILE:
            os.makedirs(LOG_DIR, exist_ok=True)
            file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            base.addHandler(file_handler)
        base.setLevel(level.upper() if isinstance(level, str) else level)
    return base


def get_logger(name: str = BASE_LOGGER_NAME, level: str = "INFO") -> Logger:
    """
    Devuelve un logger del paquete.

    Los handlers viven solo en el logger base; los hijos propagan hacia él.
    """
    _configure_base(level)
    if name == BASE_LOGGER_NAME or name.startswith(BASE_LOGGER_NAME + "."):
        full_name = name
    else:
        full_name = f"{BASE_LOGGER_NAME}.{name}"
    return logging.getLogger(full_name)


def set_level(level: str) -> None:
    """Ajusta el nivel del logger base (y por herencia, de todos los hijos)."""
    _configure_base(level).setLevel(level.upper())


# default module logger
logger = get_logger()
