"""
Tests para la configuración del motor (pydantic-settings).
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from cfdi_extractor.core.config import EngineSettings


class TestEngineSettings:
    """Tests para EngineSettings"""

    def test_defaults(self):
        """Test: valores por defecto"""
        cfg = EngineSettings(_env_file=None)
        assert cfg.RECONCILIATION_TOLERANCE == Decimal("0.10")
        assert cfg.NEGLIGIBLE_DIFFERENCE == Decimal("0.01")
        assert cfg.KNOWN_BAD_THRESHOLD == Decimal("100000")
        assert cfg.PLACEHOLDER_CURRENCIES == ["XXX"]
        assert cfg.MAX_WORKERS == 1
        assert cfg.CATALOG_PATH is None

    def test_env_prefix(self, monkeypatch):
        """Test: variables de entorno con prefijo CFDI_"""
        monkeypatch.setenv("CFDI_MAX_WORKERS", "4")
        monkeypatch.setenv("CFDI_RECONCILIATION_TOLERANCE", "0.05")
        cfg = EngineSettings(_env_file=None)
        assert cfg.MAX_WORKERS == 4
        assert cfg.RECONCILIATION_TOLERANCE == Decimal("0.05")

    def test_currency_list_from_string(self):
        """Test: monedas placeholder desde texto separado por comas"""
        cfg = EngineSettings(_env_file=None, PLACEHOLDER_CURRENCIES="xxx, xts")
        assert cfg.PLACEHOLDER_CURRENCIES == ["XXX", "XTS"]

    def test_currency_list_from_env(self, monkeypatch):
        """Test: monedas placeholder desde variable de entorno separada por comas"""
        monkeypatch.setenv("CFDI_PLACEHOLDER_CURRENCIES", "XXX,yyy")
        cfg = EngineSettings(_env_file=None)
        assert cfg.PLACEHOLDER_CURRENCIES == ["XXX", "YYY"]

    def test_invalid_workers(self):
        """Test: MAX_WORKERS menor a 1 es inválido"""
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, MAX_WORKERS=0)

    def test_negative_tolerance(self):
        """Test: tolerancia negativa es inválida"""
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, RECONCILIATION_TOLERANCE=Decimal("-1"))
