# sunat_xml/core/__init__.py

"""
Módulo core - Componentes fundamentales del decodificador.
"""
from sunat_xml.core.xml_utils import (
    safe_parse_xml,
    get_text,
    get_nodes,
    get_node,
    get_attribute,
    safe_decimal,
    safe_float,
    UBL_NAMESPACES
)
from sunat_xml.core.xml_parser import XMLParser
from sunat_xml.core.config import ParserSettings, parser_settings

__all__ = [
    # XML utilities
    'safe_parse_xml',
    'get_text',
    'get_nodes',
    'get_node',
    'get_attribute',
    'safe_decimal',
    'safe_float',
    'UBL_NAMESPACES',

    # XML parser
    'XMLParser',

    # Config
    'ParserSettings',
    'parser_settings',
]
