"""
Extractor del hash del comprobante (DigestValue de la firma digital).
"""
from typing import Optional
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_utils import get_nodes, get_text, get_attribute, UBL_NAMESPACES


class SignatureExtractor:
    """
    Busca la Reference de la firma que apunta al documento completo
    (URI vacío o '#...') y devuelve su DigestValue.

    El hash es metadato no crítico: cualquier error se ignora.
    """

    SIGNATURE_PATH = (
        "./ext:UBLExtensions/ext:UBLExtension/ext:ExtensionContent/ds:Signature"
    )

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def extract(self, root: etree._Element) -> Optional[str]:
        hash_cpe = None
        try:
            for signature in get_nodes(root, self.SIGNATURE_PATH, self.namespaces):
                for reference in get_nodes(signature, "./ds:SignedInfo/ds:Reference", self.namespaces):
                    uri = get_attribute(reference, "URI")
                    if uri == "" or uri.startswith("#"):
                        hash_cpe = get_text(reference, "./ds:DigestValue", self.namespaces) or None
                        break
                if hash_cpe:
                    break
        except Exception as exc:
            logger.debug(f"No se pudo leer el hash del comprobante: {exc}")
        return hash_cpe
