"""
Decodificador de comprobantes electrónicos SUNAT (UBL 2.1).
"""
from sunat_xml.facade import InvoiceParserFacade, parse_invoice_xml
from sunat_xml.models import ParsedInvoice, ParsedItem, TIPO_DOC_MAP
from sunat_xml.validation import check_consistency

__version__ = "1.0.0"

__all__ = [
    'InvoiceParserFacade',
    'parse_invoice_xml',
    'ParsedInvoice',
    'ParsedItem',
    'TIPO_DOC_MAP',
    'check_consistency',
]

from sunat_xml.core.config import parser_settings as _parser_settings
from sunat_xml.utils.logger import get_logger as _get_logger

_get_logger("sunat_xml", _parser_settings.log_level)
