"""
Acceso multi-tenant a empresas.

Un usuario accede a una empresa si es su dueño o miembro. El superadmin
accede a todas.
"""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from contador.core.security import is_superadmin
from contador.crud.company import get_company, is_member
from contador.models.company import Company
from contador.models.usuario import Usuario


def usuario_puede_acceder(db: Session, company: Company, usuario: Usuario) -> bool:
    if is_superadmin(usuario):
        return True
    if company.owner_id == usuario.id:
        return True
    return is_member(db, company.id, usuario.id)


def require_company_access(db: Session, company_id: int, usuario: Usuario) -> Company:
    """
    Devuelve la empresa si el usuario tiene acceso.

    Raises:
        HTTPException 404: no existe o no es accesible (no se distingue
        para no revelar empresas ajenas)
    """
    company = get_company(db, company_id)
    if not company or not company.activo or not usuario_puede_acceder(db, company, usuario):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada"
        )
    return company
