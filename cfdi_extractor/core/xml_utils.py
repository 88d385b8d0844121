"""
Utilidades para manejo de XML de comprobantes fiscales digitales (CFDI).

Las búsquedas se hacen por nombre local (local-name) para aceptar por igual
CFDI 3.3 y 4.0, complementos de pago 1.0 y 2.0, y documentos sin prefijo.
"""
from typing import Iterable, List, Optional, Union

from lxml import etree

from cfdi_extractor.utils.logger import get_logger

logger = get_logger("XMLUtils")


# Namespaces conocidos (referencia para serialización y pruebas)
CFDI_NAMESPACES = {
    'cfdi33': 'http://www.sat.gob.mx/cfd/3',
    'cfdi': 'http://www.sat.gob.mx/cfd/4',
    'pago10': 'http://www.sat.gob.mx/Pagos',
    'pago20': 'http://www.sat.gob.mx/Pagos20',
    'tfd': 'http://www.sat.gob.mx/TimbreFiscalDigital',
}


def _build_parser() -> etree.XMLParser:
    # Sin modo recover: un XML estructuralmente roto es una falla del documento
    return etree.XMLParser(
        recover=False,
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
    )


def safe_parse_xml(xml_source: Union[bytes, str]) -> Optional[etree._Element]:
    """
    Parsea XML de manera segura desde bytes o texto.

    Args:
        xml_source: Contenido XML (bytes/str)

    Returns:
        Elemento raíz del XML o None si hay error
    """
    try:
        if isinstance(xml_source, str):
            xml_source = xml_source.encode('utf-8')
        return etree.fromstring(xml_source, _build_parser())
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.error(f"Error parseando XML: {e}")
        return None


def local_name(tag) -> str:
    """Nombre local de un tag, sin namespace."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[-1] if "}" in tag else tag


def find_first(element: etree._Element, name: str) -> Optional[etree._Element]:
    """Primer descendiente con el nombre local indicado, o None."""
    if element is None:
        return None
    nodes = element.xpath(".//*[local-name()=$n]", n=name)
    return nodes[0] if nodes else None


def find_all(element: etree._Element, name: str) -> List[etree._Element]:
    """Todos los descendientes con el nombre local indicado, en orden de documento."""
    if element is None:
        return []
    return list(element.xpath(".//*[local-name()=$n]", n=name))


def find_children(element: etree._Element, name: str) -> List[etree._Element]:
    """Hijos directos con el nombre local indicado."""
    if element is None:
        return []
    return list(element.xpath("./*[local-name()=$n]", n=name))


def find_child(element: etree._Element, name: str) -> Optional[etree._Element]:
    children = find_children(element, name)
    return children[0] if children else None


def find_comprobante(root: etree._Element) -> Optional[etree._Element]:
    """
    Localiza el nodo Comprobante: la raíz misma o un descendiente
    (por ejemplo, cuando el CFDI viene envuelto en otro documento).
    """
    if root is None:
        return None
    if local_name(root.tag) == "Comprobante":
        return root
    return find_first(root, "Comprobante")


def has_attribute_value(
    element: etree._Element,
    attr_names: Iterable[str],
    value: str,
) -> bool:
    """
    Indica si el elemento o algún descendiente tiene alguno de los atributos
    indicados con el valor exacto `value`.
    """
    if element is None:
        return False
    for attr in attr_names:
        if element.xpath(f"descendant-or-self::*[@{attr}=$v]", v=value):
            return True
    return False
