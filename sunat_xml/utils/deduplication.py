from __future__ import annotations
import hashlib
import json
from typing import Iterable, List, Tuple

from sunat_xml.utils.logger import logger
from sunat_xml.models.invoice_types import ParsedInvoice

KEY_FIELDS = ("ruc", "tipo_documento", "serie", "numero")


def make_comprobante_key(parsed: ParsedInvoice) -> str:
    """Huella sha256 de (ruc emisor, tipo, serie, número)."""
    payload = {k: (getattr(parsed, k) or "").strip().upper() for k in KEY_FIELDS}
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def deduplicate_parsed(comprobantes: Iterable[ParsedInvoice]) -> Tuple[List[ParsedInvoice], int]:
    """
    Quita duplicados dentro de un mismo lote preservando la primera ocurrencia.

    Returns:
        (comprobantes únicos, cantidad descartada)
    """
    seen = set()
    out: List[ParsedInvoice] = []
    descartados = 0
    for parsed in comprobantes:
        key = make_comprobante_key(parsed)
        if key in seen:
            descartados += 1
            continue
        seen.add(key)
        out.append(parsed)
    if descartados:
        logger.info(f"Comprobantes duplicados en el lote: {descartados}. Se conserva la primera ocurrencia.")
    return out, descartados
