from sqlalchemy.orm import Session
from typing import List, Optional

from contador.models.company import Company, CompanyMember, MemberRole
from contador.models.usuario import Usuario


# -----------------------------------------------------
# Obtener empresa
# -----------------------------------------------------
def get_company(db: Session, company_id: int) -> Optional[Company]:
    return db.query(Company).filter(Company.id == company_id).first()


def get_company_by_ruc(db: Session, ruc: str) -> Optional[Company]:
    return db.query(Company).filter(Company.ruc == ruc).first()


# -----------------------------------------------------
# Empresas visibles para un usuario
# -----------------------------------------------------
def list_companies_for_usuario(db: Session, usuario: Usuario, ver_todas: bool = False) -> List[Company]:
    query = db.query(Company).filter(Company.activo == True)
    if not ver_todas:
        query = query.join(CompanyMember).filter(CompanyMember.usuario_id == usuario.id)
    return query.order_by(Company.creado_en.desc()).all()


def is_member(db: Session, company_id: int, usuario_id: int) -> bool:
    return db.query(CompanyMember).filter(
        CompanyMember.company_id == company_id,
        CompanyMember.usuario_id == usuario_id
    ).first() is not None


# -----------------------------------------------------
# Crear empresa (el creador queda como OWNER)
# -----------------------------------------------------
def create_company(db: Session, data: dict, owner: Usuario) -> Company:
    company = Company(**data, owner_id=owner.id)
    company.members.append(CompanyMember(usuario_id=owner.id, rol=MemberRole.OWNER))
    db.add(company)
    db.commit()
    db.refresh(company)
    return company
