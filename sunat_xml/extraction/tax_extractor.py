"""
Extractor de montos: total a pagar, IGV y base imponible.

El total siempre sale del XML (PayableAmount). La base imponible solo se
calcula cuando el documento no declara TaxableAmount para el IGV.
"""
from decimal import Decimal
from typing import Dict
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_utils import get_text, get_nodes, safe_decimal, UBL_NAMESPACES

# Catálogo 05 SUNAT: código de tributo del IGV
IGV_TAX_ID = "1000"
IGV_TAX_NAME = "IGV"


class TaxTotalsExtractor:
    """Extrae total, IGV y base imponible a nivel de documento"""

    # Jerarquía de rutas para el total a pagar
    PAYABLE_AMOUNT_PATHS = [
        "./cac:LegalMonetaryTotal/cbc:PayableAmount",
        "./cac:RequestedMonetaryTotal/cbc:PayableAmount",  # DebitNote
    ]

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def extract(self, root: etree._Element) -> Dict[str, Decimal]:
        """
        Returns:
            {'total': Decimal, 'igv': Decimal, 'base_imponible': Decimal}
        """
        total = self.extract_total(root)
        igv, base = self.extract_igv(root)

        if base == 0 and total > 0:
            base = total - igv
            logger.debug(f"Base imponible no declarada, se usa total - IGV = {base}")

        return {"total": total, "igv": igv, "base_imponible": base}

    def extract_total(self, root: etree._Element) -> Decimal:
        for xpath in self.PAYABLE_AMOUNT_PATHS:
            value = get_text(root, xpath, self.namespaces)
            if value:
                return safe_decimal(value)
        return Decimal("0.00")

    def extract_igv(self, root: etree._Element):
        """
        Recorre los TaxTotal del documento (no los de línea) y acumula
        el IGV y su base de los TaxSubtotal con tributo 1000 / IGV.

        Returns:
            Tupla (igv, base_imponible)
        """
        igv = Decimal("0.00")
        base = Decimal("0.00")

        for tax_total in get_nodes(root, "./cac:TaxTotal", self.namespaces):
            total_tax_amount = safe_decimal(get_text(tax_total, "./cbc:TaxAmount", self.namespaces))

            for subtotal in get_nodes(tax_total, "./cac:TaxSubtotal", self.namespaces):
                if not self._is_igv(subtotal):
                    continue

                sub_amount = get_text(subtotal, "./cbc:TaxAmount", self.namespaces)
                igv += safe_decimal(sub_amount) if sub_amount else total_tax_amount
                base += safe_decimal(get_text(subtotal, "./cbc:TaxableAmount", self.namespaces))

        return igv, base

    def _is_igv(self, subtotal: etree._Element) -> bool:
        scheme = "./cac:TaxCategory/cac:TaxScheme"
        tax_id = get_text(subtotal, f"{scheme}/cbc:ID", self.namespaces)
        tax_name = get_text(subtotal, f"{scheme}/cbc:Name", self.namespaces)
        return tax_id == IGV_TAX_ID or tax_name == IGV_TAX_NAME
