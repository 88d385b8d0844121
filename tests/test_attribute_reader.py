"""
Tests para la lectura tolerante de atributos numéricos y de texto.
"""
from decimal import Decimal

from lxml import etree

from cfdi_extractor.core.attribute_reader import (
    has_attribute,
    parse_amount,
    read_amount,
    read_raw,
    read_text,
)
from cfdi_extractor.core.money import add2, round2, sum2


def _node(**attrs):
    node = etree.Element("Comprobante")
    for key, value in attrs.items():
        node.set(key, value)
    return node


class TestParseAmount:
    """Tests para parse_amount"""

    def test_plain_decimal(self):
        """Test: literal numérico simple"""
        assert parse_amount("116.00") == Decimal("116.00")

    def test_negative_value(self):
        """Test: valor negativo"""
        assert parse_amount("-12.5") == Decimal("-12.5")

    def test_comma_decimal_with_thousands(self):
        """Test: formato 1.234,56 (punto de miles, coma decimal)"""
        assert parse_amount("1.234,56") == Decimal("1234.56")

    def test_comma_decimal_without_thousands(self):
        """Test: coma como punto decimal"""
        assert parse_amount("1,5") == Decimal("1.5")

    def test_exponent_literal(self):
        """Test: notación exponencial"""
        assert parse_amount("1e3") == Decimal("1000")

    def test_huge_exponent_returns_default(self):
        """Test: magnitudes que no caben en centavos devuelven el valor por defecto"""
        assert parse_amount("1e30") == Decimal("0")
        assert parse_amount("1e30", Decimal("1")) == Decimal("1")
        assert parse_amount("1e25") == Decimal("1e25")

    def test_none_returns_default(self):
        """Test: atributo ausente devuelve el valor por defecto"""
        assert parse_amount(None) == Decimal("0")
        assert parse_amount(None, Decimal("1")) == Decimal("1")

    def test_garbage_returns_default(self):
        """Test: texto no numérico devuelve el valor por defecto"""
        assert parse_amount("abc") == Decimal("0")
        assert parse_amount("12abc", Decimal("1")) == Decimal("1")

    def test_blank_returns_default(self):
        """Test: texto vacío o solo espacios"""
        assert parse_amount("   ") == Decimal("0")

    def test_non_finite_rejected(self):
        """Test: NaN e Infinity no son montos válidos"""
        assert parse_amount("NaN") == Decimal("0")
        assert parse_amount("Infinity") == Decimal("0")
        assert parse_amount("-inf", Decimal("7")) == Decimal("7")

    def test_surrounding_whitespace(self):
        """Test: espacios alrededor se ignoran"""
        assert parse_amount("  42.10 ") == Decimal("42.10")


class TestReadHelpers:
    """Tests para read_raw, read_amount, read_text y has_attribute"""

    def test_read_raw_missing(self):
        """Test: atributo inexistente es None"""
        assert read_raw(_node(), "Total") is None

    def test_read_raw_none_node(self):
        """Test: nodo None es None"""
        assert read_raw(None, "Total") is None

    def test_read_amount_exchange_rate_default(self):
        """Test: TipoCambio ausente toma el valor por defecto 1"""
        assert read_amount(_node(), "TipoCambio", Decimal("1")) == Decimal("1")

    def test_read_amount_present(self):
        """Test: lectura de un monto presente"""
        assert read_amount(_node(Total="1.160,00"), "Total") == Decimal("1160.00")

    def test_read_text(self):
        """Test: lectura de texto con valor por defecto"""
        node = _node(Moneda=" MXN ")
        assert read_text(node, "Moneda") == "MXN"
        assert read_text(node, "Serie") == ""
        assert read_text(node, "Serie", "N/A") == "N/A"

    def test_has_attribute(self):
        """Test: presencia de atributo aunque esté vacío"""
        node = _node(Total="")
        assert has_attribute(node, "Total") is True
        assert has_attribute(node, "SubTotal") is False
        assert has_attribute(None, "Total") is False


class TestMoney:
    """Tests para el redondeo monetario"""

    def test_round_half_up(self):
        """Test: 0.005 redondea hacia arriba"""
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2(Decimal("-2.675")) == Decimal("-2.68")

    def test_add2_rounds_each_step(self):
        """Test: redondeo después de cada suma"""
        assert add2(Decimal("0.005"), Decimal("0.005")) == Decimal("0.02")

    def test_sum2_empty(self):
        """Test: suma vacía es cero con dos decimales"""
        assert sum2([]) == Decimal("0.00")
