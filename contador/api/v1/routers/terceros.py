# contador/api/v1/routers/terceros.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.security import get_current_usuario
from contador.schemas.common import ErrorResponse
from contador.schemas.tercero import TerceroResponse
from contador.services.ruc_service import consultar
from sunat_xml.utils.ruc_utils import TIPO_DOC_DNI, TIPO_DOC_RUC

router = APIRouter()

LONGITUD_DOCUMENTO = {TIPO_DOC_RUC: 11, TIPO_DOC_DNI: 8}


@router.get(
    "/consulta",
    response_model=TerceroResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Consultar RUC o DNI",
)
def consulta(
    tipo: str = Query(TIPO_DOC_RUC, description="6 = RUC, 1 = DNI"),
    numero: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    """Primero la caché local de terceros; luego las APIs públicas en orden."""
    numero = numero.strip()
    longitud = LONGITUD_DOCUMENTO.get(tipo)
    if longitud is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tipo de documento no soportado")
    if len(numero) != longitud or not numero.isdigit():
        nombre = "RUC" if tipo == TIPO_DOC_RUC else "DNI"
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{nombre} debe tener {longitud} dígitos"
        )

    data = consultar(db, tipo, numero)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No se encontró información para el documento"
        )
    return data
