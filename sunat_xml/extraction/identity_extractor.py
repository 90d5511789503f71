"""
Extractor de identificación del comprobante: tipo, serie-número, emisor,
receptor, fechas y moneda.
"""
from typing import Optional, Dict, Any
from lxml import etree

from sunat_xml.core.xml_utils import get_text, get_node, get_attribute, UBL_NAMESPACES

SUPPLIER = "./cac:AccountingSupplierParty/cac:Party"
CUSTOMER = "./cac:AccountingCustomerParty/cac:Party"


class IdentityExtractor:
    """Extrae campos de identificación y de las partes del comprobante"""

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def extract(self, root: etree._Element, kind: str) -> Dict[str, Any]:
        """
        Args:
            root: Elemento raíz del comprobante
            kind: 'Invoice', 'CreditNote' o 'DebitNote'

        Returns:
            Diccionario con campos de identificación
        """
        serie, numero = self.extract_serie_numero(root)
        tipo_doc_tercero, numero_doc_tercero = self.extract_customer_id(root)
        return {
            "tipo_documento": self.extract_tipo_documento(root, kind),
            "serie": serie,
            "numero": numero,
            "ruc": self.extract_supplier_ruc(root),
            "razon_social_emisor": self._extract_party_name(root, SUPPLIER),
            "direccion_emisor": self.extract_supplier_address(root),
            "tipo_doc_tercero": tipo_doc_tercero,
            "numero_doc_tercero": numero_doc_tercero,
            "razon_social_tercero": self._extract_party_name(root, CUSTOMER),
            "direccion_tercero": self.extract_customer_address(root),
            "fecha_emision": get_text(root, "./cbc:IssueDate", self.namespaces),
            "fecha_vencimiento": self.extract_due_date(root),
            "moneda": get_text(root, "./cbc:DocumentCurrencyCode", self.namespaces) or "PEN",
        }

    def extract_tipo_documento(self, root: etree._Element, kind: str) -> str:
        """Código de dos dígitos: notas por tipo de raíz, facturas por InvoiceTypeCode"""
        if kind == "CreditNote":
            return "07"
        if kind == "DebitNote":
            return "08"
        code = get_text(root, "./cbc:InvoiceTypeCode", self.namespaces)
        return (code or "01").zfill(2)

    def extract_serie_numero(self, root: etree._Element):
        """'F001-123' -> ('F001', '123')"""
        doc_id = get_text(root, "./cbc:ID", self.namespaces)
        partes = doc_id.split("-")
        serie = partes[0] if partes else ""
        numero = partes[1] if len(partes) > 1 else ""
        return serie, numero

    def extract_supplier_ruc(self, root: etree._Element) -> str:
        # Ruta 1: UBL 2.1
        ruc = get_text(root, f"{SUPPLIER}/cac:PartyIdentification/cbc:ID", self.namespaces)
        if ruc:
            return ruc

        # Ruta 2: formato UBL 2.0 antiguo
        return get_text(
            root, "./cac:AccountingSupplierParty/cbc:CustomerAssignedAccountID", self.namespaces
        )

    def extract_customer_id(self, root: etree._Element):
        """(tipo de documento de identidad, número). El tipo viene en schemeID, por defecto RUC."""
        node = get_node(root, f"{CUSTOMER}/cac:PartyIdentification/cbc:ID", self.namespaces)
        if node is not None:
            return get_attribute(node, "schemeID") or "6", (node.text or "").strip()

        numero = get_text(
            root, "./cac:AccountingCustomerParty/cbc:CustomerAssignedAccountID", self.namespaces
        )
        tipo = get_text(
            root, "./cac:AccountingCustomerParty/cbc:AdditionalAccountID", self.namespaces
        )
        return tipo or "6", numero

    def _extract_party_name(self, root: etree._Element, party_path: str) -> str:
        name = get_text(root, f"{party_path}/cac:PartyLegalEntity/cbc:RegistrationName", self.namespaces)
        if name:
            return name
        return get_text(root, f"{party_path}/cac:PartyName/cbc:Name", self.namespaces)

    def extract_supplier_address(self, root: etree._Element) -> Optional[str]:
        """Dirección del emisor (intenta múltiples rutas)"""
        for address_path in (
            f"{SUPPLIER}/cac:PartyLegalEntity/cac:RegistrationAddress",
            f"{SUPPLIER}/cac:PostalAddress",
        ):
            address = get_node(root, address_path, self.namespaces)
            if address is None:
                continue
            line = get_text(address, "./cac:AddressLine/cbc:Line", self.namespaces)
            if line:
                return line
            street = get_text(address, "./cbc:StreetName", self.namespaces)
            if street:
                return street
        return None

    def extract_customer_address(self, root: etree._Element) -> Optional[str]:
        line = get_text(
            root,
            f"{CUSTOMER}/cac:PartyLegalEntity/cac:RegistrationAddress/cac:AddressLine/cbc:Line",
            self.namespaces
        )
        return line or None

    def extract_due_date(self, root: etree._Element) -> Optional[str]:
        """Fecha de vencimiento: DueDate o PaymentTerms/PaymentDueDate"""
        due_date = get_text(root, "./cbc:DueDate", self.namespaces)
        if due_date:
            return due_date

        due_date = get_text(root, "./cac:PaymentTerms/cbc:PaymentDueDate", self.namespaces)
        return due_date or None
