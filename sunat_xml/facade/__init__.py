"""
Punto de entrada unificado para decodificar comprobantes.
"""
from sunat_xml.facade.invoice_parser_facade import InvoiceParserFacade, parse_invoice_xml

__all__ = [
    'InvoiceParserFacade',
    'parse_invoice_xml',
]
