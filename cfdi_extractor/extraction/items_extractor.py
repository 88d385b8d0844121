"""
Extractor de conceptos (líneas) de un CFDI.
"""
from typing import List

from lxml import etree

from cfdi_extractor.core.attribute_reader import read_amount, read_text
from cfdi_extractor.core.money import ZERO, round2
from cfdi_extractor.core.xml_utils import find_all, find_child, find_children
from cfdi_extractor.models.cfdi_types import Concepto

EXENTO = "Exento"


def sum_traslados(node: etree._Element, tag: str = "Traslado", factor_attr: str = "TipoFactor",
                  importe_attr: str = "Importe"):
    """
    Suma los importes de los traslados no exentos bajo `node`.

    Los traslados marcados como exentos no aportan impuesto.
    """
    total = ZERO
    for traslado in find_all(node, tag):
        if read_text(traslado, factor_attr) == EXENTO:
            continue
        total = round2(total + read_amount(traslado, importe_attr))
    return total


class ConceptosExtractor:
    """Extrae los conceptos del nodo Conceptos"""

    def extract(self, conceptos_node: etree._Element) -> List[Concepto]:
        """
        Extrae todos los conceptos en orden de documento.

        Args:
            conceptos_node: Nodo cfdi:Conceptos

        Returns:
            Lista de conceptos (puede estar vacía)
        """
        return [
            self._extract_single(node)
            for node in find_children(conceptos_node, "Concepto")
        ]

    def _extract_single(self, node: etree._Element) -> Concepto:
        impuestos_node = find_child(node, "Impuestos")
        impuestos = sum_traslados(impuestos_node) if impuestos_node is not None else ZERO

        return Concepto(
            descripcion=read_text(node, "Descripcion"),
            valor_unitario=read_amount(node, "ValorUnitario"),
            importe=read_amount(node, "Importe"),
            cantidad=read_amount(node, "Cantidad"),
            impuestos=impuestos,
            clave_prod_serv=read_text(node, "ClaveProdServ"),
            clave_unidad=read_text(node, "ClaveUnidad"),
            unidad=read_text(node, "Unidad"),
        )
