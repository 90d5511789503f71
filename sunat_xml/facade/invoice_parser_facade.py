"""
Fachada del decodificador de comprobantes UBL 2.1 SUNAT.

Uso:
    facade = InvoiceParserFacade(xml_text).load()
    parsed = facade.extract()   # ParsedInvoice o None

El decodificador nunca lanza excepciones por contenido inválido: registra
el error y devuelve None. El llamador decide qué hacer con cada documento.
"""
import time
from typing import Optional, Union
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_parser import XMLParser
from sunat_xml.extraction import (
    IdentityExtractor,
    TaxTotalsExtractor,
    ItemsExtractor,
    NotesExtractor,
    SignatureExtractor,
)
from sunat_xml.models.invoice_types import ParsedInvoice


class InvoiceParserFacade:
    """
    Orquesta los extractores sobre un único documento.
    """

    def __init__(self, content: Union[str, bytes]):
        self.content = content
        self.document: Optional[etree._Element] = None
        self.kind: Optional[str] = None
        self.start_time: float = 0.0

        # --- COMPOSICIÓN DE EXTRACTORES ---
        self.xml_parser = XMLParser()
        self.identity_extractor = IdentityExtractor()
        self.tax_extractor = TaxTotalsExtractor()
        self.items_extractor = ItemsExtractor()
        self.notes_extractor = NotesExtractor()
        self.signature_extractor = SignatureExtractor()

    def load(self) -> "InvoiceParserFacade":
        """Parsea el contenido y resuelve el tipo de documento."""
        self.document = self.xml_parser.parse(self.content)
        self.kind = self.xml_parser.detect_document_kind(self.document)
        return self

    @property
    def is_loaded(self) -> bool:
        return self.document is not None and self.kind is not None

    def extract(self) -> Optional[ParsedInvoice]:
        if not self.is_loaded:
            logger.error("XML no válido o no reconocido como comprobante UBL")
            return None

        self.start_time = time.time()

        try:
            identity = self.identity_extractor.extract(self.document, self.kind)
            totales = self.tax_extractor.extract(self.document)

            parsed = ParsedInvoice(
                **identity,
                base_imponible=totales["base_imponible"],
                igv=totales["igv"],
                total=totales["total"],
                observaciones=self.notes_extractor.extract(self.document),
                hash_cpe=self.signature_extractor.extract(self.document),
                items=self.items_extractor.extract(self.document, self.kind),
            )

            logger.debug(
                f"Comprobante {parsed.numero_completo} ({self.kind}) decodificado "
                f"en {int((time.time() - self.start_time) * 1000)} ms"
            )
            return parsed

        except Exception as exc:
            logger.error(f"Error fatal durante la extracción del comprobante: {exc}", exc_info=True)
            return None


def parse_invoice_xml(content: Union[str, bytes]) -> Optional[ParsedInvoice]:
    """
    Decodifica un Invoice, CreditNote o DebitNote.

    Returns:
        ParsedInvoice, o None si el XML está mal formado o la raíz no es
        un comprobante reconocido.
    """
    try:
        return InvoiceParserFacade(content).load().extract()
    except Exception as exc:
        logger.error(f"Error parseando XML: {exc}")
        return None
