"""
Extractor de observaciones (cbc:Note).

SUNAT exige la leyenda del monto en letras como una nota más
(catálogo 52, código 1000). Esa leyenda no es una observación y se descarta.
"""
import re
from typing import Optional, List
from lxml import etree

from sunat_xml.utils.logger import logger
from sunat_xml.core.xml_utils import get_nodes, get_attribute, UBL_NAMESPACES

# Catálogo 52: leyenda "monto expresado en letras"
AMOUNT_IN_WORDS_LOCALE = "1000"

_SON_PREFIX = re.compile(r"^\s*SON\s*[:\-]?\s+\S", re.IGNORECASE)
# "Son ..." también es texto libre; la leyenda lleva céntimos o moneda
_AMOUNT_SHAPE = re.compile(
    r"\b\d{1,2}\s*/\s*100\b|\b(SOLES|D[OÓ]LARES|EUROS)\b",
    re.IGNORECASE,
)
_CENTS_WITH_CURRENCY = re.compile(
    r"\b\d{1,2}\s*/\s*100\b.*\b(SOLES|NUEVOS\s+SOLES|D[OÓ]LARES|EUROS|M\.?N\.?)\b",
    re.IGNORECASE,
)


def is_amount_in_words(text: str, locale_id: str = "") -> bool:
    """
    True si la nota es el importe en letras.

    Ejemplos descartados:
        'SON: CIENTO DIECIOCHO CON 00/100 SOLES'
        'MIL DOSCIENTOS Y 50/100 DOLARES AMERICANOS'
    """
    if locale_id == AMOUNT_IN_WORDS_LOCALE:
        return True
    if not text:
        return False
    if _SON_PREFIX.match(text) and _AMOUNT_SHAPE.search(text):
        return True
    return bool(_CENTS_WITH_CURRENCY.search(text))


class NotesExtractor:
    """Extrae las notas libres del comprobante"""

    def __init__(self):
        self.namespaces = UBL_NAMESPACES

    def extract(self, root: etree._Element) -> Optional[str]:
        """
        Returns:
            Notas unidas con salto de línea, o None si no hay notas útiles
        """
        try:
            notas: List[str] = []
            for note_node in get_nodes(root, "./cbc:Note", self.namespaces):
                texto = (note_node.text or "").strip()
                if not texto:
                    continue
                if is_amount_in_words(texto, get_attribute(note_node, "languageLocaleID")):
                    continue
                notas.append(texto)

            return "\n".join(notas) if notas else None

        except Exception as exc:
            logger.warning(f"Error extrayendo notas: {exc}")
            return None
