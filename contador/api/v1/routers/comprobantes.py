# contador/api/v1/routers/comprobantes.py
"""
Comprobantes de una empresa: listado, detalle, anulación y resumen del período.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.company_access import require_company_access
from contador.core.security import get_current_usuario
from contador.crud.comprobante import (
    anular_comprobante, get_comprobante, list_activos_periodo, list_comprobantes, list_periodos
)
from contador.models.comprobante import EstadoComprobante
from contador.schemas.common import ErrorResponse, PaginatedResponse, PaginationMetadata
from contador.schemas.comprobante import ComprobanteDetalle, ComprobanteResponse, ResumenPeriodo
from contador.services.resumen_service import calcular_resumen, periodo_valido
from contador.utils.logger import logger

router = APIRouter()


@router.get(
    "/{company_id}/comprobantes",
    response_model=PaginatedResponse[ComprobanteResponse],
    summary="Listar comprobantes (paginado)",
)
def list_all(
    company_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=500),
    periodo: Optional[str] = None,
    tipo: Optional[str] = Query(None, description="VENTA o COMPRA"),
    estado: Optional[str] = Query(None, description="ACTIVO o ANULADO"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    require_company_access(db, company_id, current_user)
    items, total = list_comprobantes(
        db, company_id, skip=(page - 1) * per_page, limit=per_page,
        periodo=periodo, tipo=tipo, estado=estado,
    )
    return PaginatedResponse[ComprobanteResponse](
        data=[ComprobanteResponse.model_validate(c) for c in items],
        pagination=PaginationMetadata.build(total, page, per_page),
    )


@router.get("/{company_id}/comprobantes/periodos", response_model=List[str], summary="Períodos con comprobantes")
def periodos(company_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    require_company_access(db, company_id, current_user)
    return list_periodos(db, company_id)


@router.get(
    "/{company_id}/comprobantes/resumen",
    response_model=ResumenPeriodo,
    responses={400: {"model": ErrorResponse}},
    summary="Resumen de ventas y compras del período",
)
def resumen(
    company_id: int,
    periodo: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    require_company_access(db, company_id, current_user)
    if not periodo_valido(periodo):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Período requerido (formato YYYYMM)"
        )
    return calcular_resumen(periodo, list_activos_periodo(db, company_id, periodo))


@router.get(
    "/{company_id}/comprobantes/{comprobante_id}",
    response_model=ComprobanteDetalle,
    responses={404: {"model": ErrorResponse}},
)
def get_one(company_id: int, comprobante_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    require_company_access(db, company_id, current_user)
    comprobante = get_comprobante(db, company_id, comprobante_id)
    if not comprobante:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comprobante no encontrado")
    return comprobante


@router.delete(
    "/{company_id}/comprobantes/{comprobante_id}",
    response_model=ComprobanteResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Anular comprobante (eliminación lógica)",
)
def delete(company_id: int, comprobante_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    require_company_access(db, company_id, current_user)
    comprobante = get_comprobante(db, company_id, comprobante_id)
    if not comprobante:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comprobante no encontrado")
    if comprobante.estado == EstadoComprobante.ANULADO:
        return comprobante

    comprobante = anular_comprobante(db, comprobante)
    logger.info(f"Comprobante {comprobante.serie}-{comprobante.numero} anulado por usuario {current_user.id}")
    return comprobante
