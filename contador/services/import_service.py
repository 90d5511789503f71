# contador/services/import_service.py
"""
Importación de comprobantes desde XML o ZIP.

Flujo:
1. Detectar tipo de archivo por magic bytes
2. Decodificar cada XML con sunat_xml
3. Descartar duplicados del lote y de la base (empresa, tipo, serie, número)
4. Guardar comprobante + items, clasificando VENTA/COMPRA por el RUC emisor
"""
import logging
from datetime import datetime, date, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from contador.crud.comprobante import find_by_documento
from contador.models.company import Company
from contador.models.comprobante import Comprobante, ComprobanteItem, TipoOperacion, EstadoComprobante
from contador.models.upload_history import UploadHistory, UploadStatus
from sunat_xml import ParsedInvoice, parse_invoice_xml
from sunat_xml.utils.archive import detect_file_type, extract_xmls_from_zip
from sunat_xml.utils.deduplication import deduplicate_parsed
from sunat_xml.utils.ruc_utils import TIPO_DOC_RUC

logger = logging.getLogger(__name__)

MAX_ERRORES_HISTORIAL = 3


class ImportValidationError(ValueError):
    """Archivo no soportado o sin XML válidos"""


def leer_contenidos(content: bytes) -> Tuple[str, List[str]]:
    """
    Returns:
        (tipo de archivo, lista de XML como texto)

    Raises:
        ImportValidationError
    """
    file_type = detect_file_type(content)
    if file_type == "unknown":
        raise ImportValidationError("Tipo de archivo no soportado. Use archivos XML o ZIP.")

    if file_type == "zip":
        xmls = extract_xmls_from_zip(content)
    else:
        xmls = [content.decode("utf-8", errors="replace")]

    if not xmls:
        raise ImportValidationError("No se encontraron archivos XML válidos")
    return file_type, xmls


def calcular_periodo(fecha: date) -> str:
    return f"{fecha.year}{fecha.month:02d}"


def _parse_fecha(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def resolver_tercero(parsed: ParsedInvoice, es_venta: bool) -> Tuple[str, str, str]:
    """
    Contraparte de la empresa.

    En una venta es el cliente (receptor del XML); en una compra es el
    proveedor (emisor del XML).
    """
    if es_venta:
        return parsed.tipo_doc_tercero, parsed.numero_doc_tercero, parsed.razon_social_tercero
    return TIPO_DOC_RUC, parsed.ruc, parsed.razon_social_emisor or "Proveedor"


def construir_comprobante(company: Company, parsed: ParsedInvoice, tipo_operacion: str, es_venta: bool) -> Comprobante:
    fecha_emision = _parse_fecha(parsed.fecha_emision)
    if fecha_emision is None:
        raise ValueError(f"Fecha de emisión inválida en {parsed.numero_completo}")

    tipo_doc_tercero, numero_tercero, razon_tercero = resolver_tercero(parsed, es_venta)
    gravada = parsed.igv > 0

    comprobante = Comprobante(
        company_id=company.id,
        tipo=tipo_operacion,
        tipo_documento=parsed.tipo_documento,
        serie=parsed.serie,
        numero=parsed.numero,
        fecha_emision=fecha_emision,
        fecha_vencimiento=_parse_fecha(parsed.fecha_vencimiento),
        periodo=calcular_periodo(fecha_emision),
        ruc_emisor=parsed.ruc,
        razon_social_emisor=parsed.razon_social_emisor,
        direccion_emisor=parsed.direccion_emisor,
        tipo_doc_receptor=parsed.tipo_doc_tercero,
        numero_doc_receptor=parsed.numero_doc_tercero,
        razon_social_receptor=parsed.razon_social_tercero,
        tipo_doc_tercero=tipo_doc_tercero,
        ruc_tercero=numero_tercero,
        razon_social_tercero=razon_tercero,
        moneda=parsed.moneda or "PEN",
        base_imponible=parsed.base_imponible,
        igv=parsed.igv,
        total=parsed.total,
        es_gravada=gravada,
        afecta_igv=gravada,
        observaciones=parsed.observaciones,
        hash_resumen=parsed.hash_cpe,
        estado=EstadoComprobante.ACTIVO,
    )
    comprobante.items = [
        ComprobanteItem(
            numero_linea=idx,
            cantidad=item.cantidad,
            unidad_medida=item.unidad,
            descripcion=item.descripcion,
            codigo_producto=item.codigo_producto,
            precio_unitario=item.precio_unitario,
            valor_venta=item.valor_venta,
            igv=item.igv,
            total=item.total,
        )
        for idx, item in enumerate(parsed.items, start=1)
    ]
    return comprobante


def importar_archivo(
    db: Session,
    company: Company,
    content: bytes,
    file_name: str,
    usuario_id: Optional[int] = None,
    tipo_operacion_manual: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Importa un XML o ZIP para la empresa.

    Raises:
        ImportValidationError: archivo no soportado o vacío
    """
    file_type, xmls = leer_contenidos(content)

    historial = UploadHistory(
        company_id=company.id,
        usuario_id=usuario_id,
        file_name=file_name,
        file_type=file_type,
        file_size=len(content),
        status=UploadStatus.PROCESSING,
        total=len(xmls),
    )
    db.add(historial)
    db.commit()
    db.refresh(historial)

    imported = 0
    duplicated = 0
    errors = 0
    ventas_detectadas = 0
    compras_detectadas = 0
    error_messages: List[str] = []
    creados: List[Dict[str, Any]] = []

    parsed_docs: List[ParsedInvoice] = []
    for xml in xmls:
        parsed = parse_invoice_xml(xml)
        if parsed is None:
            errors += 1
            error_messages.append("XML no válido o no reconocido")
            continue
        parsed_docs.append(parsed)

    parsed_docs, repetidos = deduplicate_parsed(parsed_docs)
    duplicated += repetidos

    for parsed in parsed_docs:
        try:
            es_venta = parsed.ruc == company.ruc
            tipo_operacion = tipo_operacion_manual or (TipoOperacion.VENTA if es_venta else TipoOperacion.COMPRA)
            if es_venta:
                ventas_detectadas += 1
            else:
                compras_detectadas += 1

            if find_by_documento(db, company.id, parsed.tipo_documento, parsed.serie, parsed.numero):
                duplicated += 1
                continue

            comprobante = construir_comprobante(company, parsed, tipo_operacion, es_venta)
            db.add(comprobante)
            db.commit()
            db.refresh(comprobante)

            creados.append({
                "id": comprobante.id,
                "tipo": tipo_operacion,
                "serie": parsed.serie,
                "numero": parsed.numero,
                "total": float(parsed.total),
                "tercero": comprobante.razon_social_tercero,
            })
            imported += 1

        except Exception as e:
            db.rollback()
            logger.error(f"Error importando {parsed.numero_completo}: {str(e)}", exc_info=True)
            errors += 1
            error_messages.append(str(e))

    historial.status = UploadStatus.FAILED if errors == len(xmls) else UploadStatus.COMPLETED
    historial.imported = imported
    historial.duplicated = duplicated
    historial.errors = errors
    historial.error_message = "; ".join(error_messages[:MAX_ERRORES_HISTORIAL]) or None
    historial.processed_at = datetime.now(timezone.utc)
    db.commit()

    logger.info(
        f"Importación {file_name} empresa {company.id}: {imported} importados, "
        f"{duplicated} duplicados, {errors} errores"
    )

    return {
        "success": True,
        "message": "Importación completada",
        "summary": {
            "total": len(xmls),
            "imported": imported,
            "duplicated": duplicated,
            "errors": errors,
            "file_type": file_type,
            "ventas_detectadas": ventas_detectadas,
            "compras_detectadas": compras_detectadas,
        },
        "comprobantes": creados,
    }
