"""
Detección de tipo de archivo y lectura de ZIPs con comprobantes.
"""
import io
import zipfile
from typing import List

from sunat_xml.utils.logger import logger
from sunat_xml.core.config import parser_settings

DOCUMENT_MARKERS = ("Invoice", "CreditNote", "DebitNote")


def detect_file_type(data: bytes) -> str:
    """
    Detecta el tipo por los primeros bytes.

    Returns:
        'zip', 'xml' o 'unknown'
    """
    if not data:
        return "unknown"

    # Firma local file header: PK
    if data[:2] == b"PK":
        return "zip"

    inicio = data[:100].decode("utf-8", errors="ignore").lstrip("\ufeff").strip()
    if inicio.startswith("<"):
        return "xml"

    return "unknown"


def extract_xmls_from_zip(data: bytes) -> List[str]:
    """
    Devuelve el contenido de los .xml del ZIP que parecen comprobantes.

    Una entrada ilegible se registra y se omite. Un ZIP corrupto devuelve [].
    """
    xmls: List[str] = []

    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            entries = archive.infolist()
            if len(entries) > parser_settings.max_zip_entries:
                logger.warning(
                    f"ZIP con {len(entries)} entradas, se leen solo {parser_settings.max_zip_entries}"
                )
                entries = entries[:parser_settings.max_zip_entries]

            for info in entries:
                if info.is_dir() or not info.filename.lower().endswith(".xml"):
                    continue
                try:
                    contenido = archive.read(info).decode("utf-8", errors="replace")
                except Exception as exc:
                    logger.error(f"Error leyendo {info.filename} del ZIP: {exc}")
                    continue

                if any(marker in contenido for marker in DOCUMENT_MARKERS):
                    xmls.append(contenido)

    except zipfile.BadZipFile as exc:
        logger.error(f"Archivo ZIP inválido: {exc}")
        return []
    except Exception as exc:
        logger.error(f"Error procesando ZIP: {exc}")
        return []

    return xmls
