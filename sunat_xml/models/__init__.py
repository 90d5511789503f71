from sunat_xml.models.invoice_types import ParsedInvoice, ParsedItem, TIPO_DOC_MAP

__all__ = ["ParsedInvoice", "ParsedItem", "TIPO_DOC_MAP"]
