"""
Tests para catálogos, formato de moneda y filas de reporte.
"""
import json
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from cfdi_extractor.aggregation.aggregator import aggregate
from cfdi_extractor.models.cfdi_types import Concepto
from cfdi_extractor.reporting.catalogs import (
    format_currency,
    forma_pago_text,
    load_catalogs,
    metodo_pago_text,
    month_label,
    month_name,
    regimen_fiscal_text,
    tipo_comprobante_text,
    uso_cfdi_text,
)
from cfdi_extractor.reporting.rows import (
    concept_rows,
    invoice_rows,
    monthly_rows,
    summary_rows,
    type_rows,
)

from conftest import make_doc


class TestCatalogs:
    """Tests para las etiquetas de catálogos del SAT"""

    def test_tipo_comprobante(self):
        """Test: etiquetas de tipo de comprobante"""
        assert tipo_comprobante_text("I") == "Ingreso"
        assert tipo_comprobante_text("N") == "Nómina"
        assert tipo_comprobante_text("Z") == "Z"

    def test_forma_y_metodo_pago(self):
        """Test: forma y método de pago"""
        assert forma_pago_text("03") == "Transferencia electrónica de fondos"
        assert forma_pago_text("99") == "Por definir"
        assert metodo_pago_text("PPD") == "Pago en parcialidades o diferido"

    def test_uso_cfdi_y_regimen(self):
        """Test: uso CFDI y régimen fiscal"""
        assert uso_cfdi_text("G03") == "Gastos en general"
        assert uso_cfdi_text("CP01") == "Pagos"
        assert regimen_fiscal_text("626") == "Régimen Simplificado de Confianza"

    def test_month_names(self):
        """Test: nombres de mes y etiqueta de mes"""
        assert month_name("03") == "Marzo"
        assert month_label("2024-12") == "Diciembre 2024"
        assert month_label("sin-mes") == "sin-mes"
        assert month_label("2024-13") == "2024-13"
        assert month_label("2024") == "2024"

    def test_custom_catalog_file(self, tmp_path):
        """Test: catálogo alterno desde archivo"""
        path = tmp_path / "catalogos.json"
        path.write_text(json.dumps({"tipo_comprobante": {"I": "Factura"}}), encoding="utf-8")
        catalogs = load_catalogs(path)
        assert catalogs["tipo_comprobante"]["I"] == "Factura"
        assert catalogs["meses"] == {}


class TestFormatCurrency:
    """Tests para format_currency"""

    def test_thousands_and_decimals(self):
        """Test: separador de miles y dos decimales"""
        assert format_currency(Decimal("1234.5")) == "$1,234.50"

    def test_negative(self):
        """Test: negativos con signo antes del símbolo"""
        assert format_currency(Decimal("-400")) == "-$400.00"

    def test_rounding(self):
        """Test: redondeo mitad hacia arriba"""
        assert format_currency(Decimal("0.005")) == "$0.01"


class TestRows:
    """Tests para las filas de reporte"""

    def _dataset(self):
        income = make_doc("I", "1000.00", "862.07", "137.93", fecha=datetime(2024, 3, 10), nombre="b.xml")
        expense = make_doc("E", "400.00", "344.83", "55.17", fecha=datetime(2024, 2, 1), nombre="a.xml")
        devolucion = Concepto("Devolución", Decimal("344.83"), Decimal("344.83"), Decimal("1"), Decimal("55.17"))
        expense = replace(expense, conceptos=(devolucion,))
        return aggregate([income, expense])

    def test_summary_rows(self):
        """Test: resumen con balance final"""
        rows = summary_rows(self._dataset().summary)
        values = dict(rows[1:])
        assert values["Total de Facturas"] == 2
        assert values["Total"] == Decimal("600.00")
        assert values["Período inicial"] == "2024-02-01"

    def test_monthly_rows_chronological(self):
        """Test: meses en orden cronológico con etiqueta en español"""
        rows = monthly_rows(self._dataset().summary)
        assert [r[0] for r in rows[1:]] == ["Febrero 2024", "Marzo 2024"]
        assert rows[1][3] == Decimal("400.00")

    def test_type_rows(self):
        """Test: etiqueta 'Ingreso (I)' y montos con signo"""
        rows = type_rows(self._dataset().summary)
        labels = {r[0]: r for r in rows[1:]}
        assert labels["Ingreso (I)"][4] == Decimal("1000.00")
        assert labels["Egreso (E)"][4] == Decimal("-400.00")

    def test_invoice_rows_sorted_and_signed(self):
        """Test: facturas ordenadas por fecha con montos de presentación"""
        rows = invoice_rows(self._dataset())
        assert rows[0][0] == "UUID"
        assert [r[0] for r in rows[1:]] == ["a.xml", "b.xml"]
        assert rows[1][8] == "Egreso"
        assert rows[1][14] == Decimal("-400.00")
        assert rows[1][11] == "Gastos en general"

    def test_concept_rows_signed_for_expense(self):
        """Test: conceptos de egreso con importe e impuestos negativos"""
        rows = concept_rows(self._dataset())
        assert len(rows) == 2
        assert rows[1][6] == "Devolución"
        assert rows[1][9] == Decimal("-344.83")
        assert rows[1][10] == Decimal("-55.17")
