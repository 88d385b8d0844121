from __future__ import annotations
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class EngineSettings(BaseSettings):
    """
    Configuración del motor de extracción y agregación.

    Las tolerancias y el umbral del pre-filtro son constantes empíricas;
    se exponen como parámetros para poder ajustarlas sin tocar código.
    Se leen de variables de entorno con prefijo CFDI_ o de un archivo .env.
    """
    LOG_LEVEL: str = "INFO"

    # Diferencia máxima aceptada entre subtotal + impuestos y total
    RECONCILIATION_TOLERANCE: Decimal = Decimal("0.10")
    # Diferencia subtotal/total por debajo de la cual un pago no lleva impuestos
    NEGLIGIBLE_DIFFERENCE: Decimal = Decimal("0.01")
    # Umbral de montos para el pre-filtro de pagos exentos mal formados
    KNOWN_BAD_THRESHOLD: Decimal = Decimal("100000")
    # NoDecode: el validador recibe el texto crudo "XXX,XTS" del entorno
    PLACEHOLDER_CURRENCIES: Annotated[List[str], NoDecode] = ["XXX"]

    # 1 = secuencial
    MAX_WORKERS: int = 1

    # Catálogo alterno de etiquetas (por defecto el JSON empaquetado)
    CATALOG_PATH: Optional[Path] = None

    @field_validator("MAX_WORKERS")
    @classmethod
    def ensure_positive_workers(cls, v):
        if v < 1:
            raise ValueError("MAX_WORKERS debe ser mayor o igual a 1")
        return v

    @field_validator("RECONCILIATION_TOLERANCE", "NEGLIGIBLE_DIFFERENCE", "KNOWN_BAD_THRESHOLD")
    @classmethod
    def ensure_non_negative(cls, v):
        if v < 0:
            raise ValueError("Las tolerancias y umbrales no pueden ser negativos")
        return v

    @field_validator("PLACEHOLDER_CURRENCIES", mode="before")
    @classmethod
    def ensure_currency_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [c.strip().upper() for c in v.split(",") if c.strip()]
        return [str(c).strip().upper() for c in v]

    class Config:
        env_prefix = "CFDI_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Instancia compartida de la configuración (se lee una sola vez)."""
    return EngineSettings()
