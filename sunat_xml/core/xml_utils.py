"""
Utilidades para manejo de XML y parseo de comprobantes electrónicos UBL 2.1 (SUNAT).
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any
from pathlib import Path
from lxml import etree

from sunat_xml.utils.logger import logger


# Namespaces UBL 2.1 usados por SUNAT
UBL_NAMESPACES = {
    'inv': 'urn:oasis:names:specification:ubl:schema:xsd:Invoice-2',
    'cn': 'urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2',
    'dn': 'urn:oasis:names:specification:ubl:schema:xsd:DebitNote-2',
    'cbc': 'urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2',
    'cac': 'urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2',
    'ext': 'urn:oasis:names:specification:ubl:schema:xsd:CommonExtensionComponents-2',
    'sac': 'urn:sunat:names:specification:ubl:peru:schema:xsd:SunatAggregateComponents-1',
    'ds': 'http://www.w3.org/2000/09/xmldsig#'
}

_XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')


def get_text(element: etree._Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> str:
    """
    Extrae texto de un elemento usando XPath de manera segura.

    Args:
        element: Elemento XML base
        xpath: Expresión XPath
        namespaces: Namespaces a usar (por defecto UBL_NAMESPACES)

    Returns:
        Texto del elemento o cadena vacía si no existe
    """
    if namespaces is None:
        namespaces = UBL_NAMESPACES

    try:
        nodes = element.xpath(xpath, namespaces=namespaces)
        if nodes and hasattr(nodes[0], 'text') and nodes[0].text:
            return nodes[0].text.strip()
    except Exception as e:
        logger.warning(f"Error extrayendo texto con XPath '{xpath}': {e}")

    return ""


def get_nodes(element: etree._Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> List[etree._Element]:
    """Solo elementos: descarta textos y atributos que devuelva el XPath."""
    if namespaces is None:
        namespaces = UBL_NAMESPACES

    try:
        nodes = element.xpath(xpath, namespaces=namespaces)
        return [node for node in nodes if isinstance(node, etree._Element)]
    except Exception as e:
        logger.warning(f"XPath inválido '{xpath}': {e}")
        return []


def get_node(element: etree._Element, xpath: str, namespaces: Optional[Dict[str, str]] = None) -> Optional[etree._Element]:
    """Primer nodo que coincide con el XPath, o None."""
    nodes = get_nodes(element, xpath, namespaces)
    return nodes[0] if nodes else None


def get_attribute(element: Optional[etree._Element], attr_name: str) -> str:
    """Atributo sin espacios; '' si el elemento es None o no lo tiene."""
    if element is None:
        return ""
    try:
        return (element.get(attr_name) or "").strip()
    except Exception as e:
        logger.warning(f"No se pudo leer el atributo '{attr_name}': {e}")
        return ""


def local_name(element: etree._Element) -> str:
    """Nombre del tag sin namespace ('{ns}Invoice' -> 'Invoice')."""
    tag = element.tag if isinstance(element.tag, str) else ""
    return tag.split('}')[-1] if '}' in tag else tag


def safe_decimal(value: Any, default: Decimal = Decimal("0.00")) -> Decimal:
    """
    Monto UBL como Decimal.

    '1,180.00' -> Decimal('1180.00'); vacío, NaN o texto inválido -> default
    """
    if value is None:
        return default

    try:
        if isinstance(value, Decimal):
            return value

        if isinstance(value, str):
            # Los montos UBL usan punto decimal; las comas son separador de miles
            cleaned = value.strip().replace(",", "").replace(" ", "")
            if not cleaned:
                return default
            result = Decimal(cleaned)
        else:
            result = Decimal(str(value))

        if not result.is_finite():
            return default
        return result

    except (InvalidOperation, ValueError, TypeError) as e:
        logger.warning(f"Monto no numérico '{value}': {e}")
        return default


def safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(safe_decimal(value, Decimal(str(default))))
    except Exception as e:
        logger.warning(f"Valor no convertible a float '{value}': {e}")
        return default


def _build_parser() -> etree.XMLParser:
    # Estricto: un XML truncado o mal formado se rechaza. Sin entidades externas ni red
    return etree.XMLParser(
        recover=False,
        strip_cdata=False,
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
    )


def safe_parse_xml(xml_source) -> Optional[etree._Element]:
    """
    Raíz del documento a partir de un Path, bytes o str.

    Quita BOM y declaración XML cuando corresponde. Entrada vacía o
    ilegible devuelve None y deja el error en el log.
    """
    try:
        parser = _build_parser()

        if isinstance(xml_source, Path):
            tree = etree.parse(str(xml_source), parser)
            return tree.getroot()

        if isinstance(xml_source, str):
            # lxml no acepta str con declaración de encoding
            text = xml_source.lstrip('\ufeff')
            text = _XML_DECLARATION.sub('', text, count=1)
            if not text.strip():
                return None
            return etree.fromstring(text, parser)

        if isinstance(xml_source, (bytes, bytearray)):
            data = bytes(xml_source)
            if data.startswith(b'\xef\xbb\xbf'):
                data = data[3:]
            if not data.strip():
                return None
            return etree.fromstring(data, parser)

        logger.error(f"Tipo de fuente XML no soportado: {type(xml_source).__name__}")
        return None

    except Exception as e:
        logger.error(f"Error parseando XML: {e}")
        return None
