"""
Extractor de líneas del comprobante.
"""
from decimal import Decimal
from typing import List, Optional
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_utils import (
    get_text, get_nodes, get_node, get_attribute, safe_decimal, UBL_NAMESPACES
)
from sunat_xml.models.invoice_types import ParsedItem

# Tipo de raíz -> (elemento de línea, elemento de cantidad)
LINE_ELEMENTS = {
    "Invoice": ("cac:InvoiceLine", "cbc:InvoicedQuantity"),
    "CreditNote": ("cac:CreditNoteLine", "cbc:CreditedQuantity"),
    "DebitNote": ("cac:DebitNoteLine", "cbc:DebitedQuantity"),
}

DEFAULT_UNIT = "NIU"


class ItemsExtractor:
    """Extrae las líneas de Invoice, CreditNote y DebitNote con la misma forma"""

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def extract(self, root: etree._Element, kind: str) -> List[ParsedItem]:
        """
        Args:
            root: Elemento raíz del comprobante
            kind: 'Invoice', 'CreditNote' o 'DebitNote'

        Returns:
            Lista de items. Las líneas sin descripción se descartan.
        """
        line_tag, quantity_tag = LINE_ELEMENTS.get(kind, LINE_ELEMENTS["Invoice"])
        items = []

        for line_node in get_nodes(root, f"./{line_tag}", self.namespaces):
            item = self._extract_single_item(line_node, quantity_tag)
            if item is not None and item.descripcion:
                items.append(item)

        return items

    def _extract_single_item(self, line_node: etree._Element, quantity_tag: str) -> Optional[ParsedItem]:
        try:
            quantity_node = get_node(line_node, f"./{quantity_tag}", self.namespaces)
            if quantity_node is not None and (quantity_node.text or "").strip():
                cantidad = safe_decimal(quantity_node.text, Decimal("1"))
            else:
                cantidad = Decimal("1")
            unidad = get_attribute(quantity_node, "unitCode") or DEFAULT_UNIT

            valor_venta = safe_decimal(get_text(line_node, "./cbc:LineExtensionAmount", self.namespaces))
            igv = safe_decimal(get_text(line_node, "./cac:TaxTotal/cbc:TaxAmount", self.namespaces))

            return ParsedItem(
                cantidad=cantidad,
                unidad=unidad,
                descripcion=get_text(line_node, "./cac:Item/cbc:Description", self.namespaces),
                codigo_producto=self._extract_codigo(line_node),
                precio_unitario=safe_decimal(
                    get_text(line_node, "./cac:Price/cbc:PriceAmount", self.namespaces)
                ),
                valor_venta=valor_venta,
                igv=igv,
                total=valor_venta + igv,
            )

        except Exception as exc:
            logger.warning(f"Error extrayendo línea del comprobante: {exc}")
            return None

    def _extract_codigo(self, line_node: etree._Element) -> Optional[str]:
        # Código del vendedor primero, luego código estándar (GTIN/UNSPSC)
        for xpath in (
            "./cac:Item/cac:SellersItemIdentification/cbc:ID",
            "./cac:Item/cac:StandardItemIdentification/cbc:ID",
        ):
            codigo = get_text(line_node, xpath, self.namespaces)
            if codigo:
                return codigo
        return None
