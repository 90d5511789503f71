# contador/api/v1/routers/companies.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.company_access import require_company_access
from contador.core.security import get_current_usuario, is_superadmin
from contador.crud.company import create_company, get_company_by_ruc, list_companies_for_usuario
from contador.schemas.common import ErrorResponse
from contador.schemas.company import CompanyCreate, CompanyResponse
from contador.services.storage_service import calcular_storage
from contador.utils.logger import logger
from sunat_xml.utils.ruc_utils import es_ruc_valido

router = APIRouter()


@router.get("", response_model=List[CompanyResponse], summary="Empresas accesibles")
def list_all(db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    """SuperAdmin ve todas; el resto solo las empresas donde es miembro."""
    return list_companies_for_usuario(db, current_user, ver_todas=is_superadmin(current_user))


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Registrar empresa",
)
def create(payload: CompanyCreate, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    if not es_ruc_valido(payload.ruc):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="RUC inválido")
    if get_company_by_ruc(db, payload.ruc):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El RUC ya está registrado en el sistema"
        )

    company = create_company(db, payload.model_dump(), current_user)
    logger.info(f"Empresa {company.ruc} creada por usuario {current_user.id}")
    return company


@router.get(
    "/{company_id}",
    response_model=CompanyResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_one(company_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    return require_company_access(db, company_id, current_user)


@router.get("/{company_id}/storage", summary="Uso de almacenamiento de la empresa")
def storage(company_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    company = require_company_access(db, company_id, current_user)
    try:
        return calcular_storage(db, company)
    except Exception as e:
        logger.error(f"Error obteniendo uso de almacenamiento: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error interno: {str(e)}"
        )
