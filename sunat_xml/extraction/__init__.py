from sunat_xml.extraction.identity_extractor import IdentityExtractor
from sunat_xml.extraction.tax_extractor import TaxTotalsExtractor
from sunat_xml.extraction.items_extractor import ItemsExtractor
from sunat_xml.extraction.notes_extractor import NotesExtractor, is_amount_in_words
from sunat_xml.extraction.signature_extractor import SignatureExtractor

__all__ = [
    "IdentityExtractor",
    "TaxTotalsExtractor",
    "ItemsExtractor",
    "NotesExtractor",
    "is_amount_in_words",
    "SignatureExtractor",
]
