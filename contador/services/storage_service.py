# contador/services/storage_service.py
"""
Uso de almacenamiento por empresa.

Los XML firmados y CDR no se pesan uno por uno: se estiman 10 KB por XML
y 5 KB por CDR.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from contador.core.config import settings
from contador.models.company import Company
from contador.models.comprobante import Comprobante
from contador.models.storage_usage import StorageUsage

logger = logging.getLogger(__name__)

XML_ESTIMATED_SIZE = 10000
CDR_ESTIMATED_SIZE = 5000

_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_bytes(size: int) -> str:
    """
    >>> format_bytes(1536)
    '1.5 KB'
    >>> format_bytes(1048576)
    '1 MB'
    """
    if not size:
        return "0 Bytes"
    negativo = size < 0
    valor = float(abs(size))
    i = 0
    while valor >= 1024 and i < len(_UNITS) - 1:
        valor /= 1024
        i += 1
    texto = f"{valor:.2f}".rstrip("0").rstrip(".")
    return f"{'-' if negativo else ''}{texto} {_UNITS[i]}"


def _byte_length(value) -> int:
    return len(value.encode("utf-8")) if value else 0


def calcular_storage(db: Session, company: Company) -> Dict[str, Any]:
    logos = _byte_length(company.logo_base64)
    certificates = _byte_length(company.certificado_digital)

    base = db.query(Comprobante).filter(Comprobante.company_id == company.id)
    xml_count = base.filter(Comprobante.xml_firmado.isnot(None)).count()
    cdr_count = base.filter(Comprobante.cdr_base64.isnot(None)).count()
    generated = xml_count * XML_ESTIMATED_SIZE + cdr_count * CDR_ESTIMATED_SIZE
    total = logos + certificates + generated

    usage = db.query(StorageUsage).filter(StorageUsage.company_id == company.id).first()
    if usage is None:
        usage = StorageUsage(company_id=company.id, max_storage=settings.default_max_storage)
        db.add(usage)

    usage.logos_size = logos
    usage.certificates_size = certificates
    usage.generated_files_size = generated
    usage.total_size = total
    usage.last_calculated = datetime.now(timezone.utc)
    db.commit()
    db.refresh(usage)

    limit = int(usage.max_storage or settings.default_max_storage)
    remaining = limit - total
    logger.info(f"Almacenamiento empresa {company.id}: {format_bytes(total)} de {format_bytes(limit)}")

    return {
        "usage": {
            "logos": logos,
            "certificates": certificates,
            "generated_files": generated,
            "total": total,
        },
        "limit": limit,
        "percentage": round(total / limit * 100) if limit else 0,
        "remaining": remaining,
        "formatted": {
            "used": format_bytes(total),
            "limit": format_bytes(limit),
            "remaining": format_bytes(remaining),
        },
        "breakdown": {
            "logos": format_bytes(logos),
            "certificates": format_bytes(certificates),
            "generated_files": format_bytes(generated),
        },
        "last_calculated": usage.last_calculated,
    }
