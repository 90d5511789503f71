"""
Parser de documentos UBL 2.1 emitidos bajo el esquema SUNAT.
Reconoce Invoice (factura/boleta), CreditNote y DebitNote.
"""
from pathlib import Path
from typing import Optional, Union
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_utils import safe_parse_xml, local_name, UBL_NAMESPACES


class XMLParser:
    """
    Carga el XML y devuelve el elemento raíz del comprobante.

    Solo acepta como raíz uno de DOCUMENT_TYPES. Cualquier otra raíz
    (ApplicationResponse/CDR, SummaryDocuments, etc.) se rechaza.
    """

    DOCUMENT_TYPES = ('Invoice', 'CreditNote', 'DebitNote')

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def parse_from_path(self, xml_path: Path) -> Optional[etree._Element]:
        try:
            root = safe_parse_xml(Path(xml_path))
            return self._extract_document_element(root)
        except Exception as exc:
            logger.error(f"Error parseando XML desde {xml_path}: {exc}")
            return None

    def parse_from_bytes(self, xml_bytes: bytes) -> Optional[etree._Element]:
        try:
            root = safe_parse_xml(xml_bytes)
            return self._extract_document_element(root)
        except Exception as exc:
            logger.error(f"Error parseando XML desde bytes: {exc}")
            return None

    def parse_from_string(self, xml_text: str) -> Optional[etree._Element]:
        try:
            root = safe_parse_xml(xml_text)
            return self._extract_document_element(root)
        except Exception as exc:
            logger.error(f"Error parseando XML desde texto: {exc}")
            return None

    def parse(self, content: Union[str, bytes]) -> Optional[etree._Element]:
        """Despacha según el tipo del contenido recibido."""
        if isinstance(content, (bytes, bytearray)):
            return self.parse_from_bytes(bytes(content))
        return self.parse_from_string(content)

    def _extract_document_element(self, root: Optional[etree._Element]) -> Optional[etree._Element]:
        if root is None:
            return None

        if self.detect_document_kind(root) is not None:
            return root

        logger.warning(f"Tipo de documento no reconocido: {local_name(root) or root.tag}")
        return None

    def detect_document_kind(self, element: Optional[etree._Element]) -> Optional[str]:
        """
        Devuelve 'Invoice', 'CreditNote' o 'DebitNote' según el nombre
        local del elemento raíz, o None si no es un comprobante reconocido.
        """
        if element is None:
            return None
        name = local_name(element)
        return name if name in self.DOCUMENT_TYPES else None

