from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from contador.models.comprobante import Comprobante, EstadoComprobante


def get_comprobante(db: Session, company_id: int, comprobante_id: int) -> Optional[Comprobante]:
    return db.query(Comprobante).filter(
        Comprobante.id == comprobante_id,
        Comprobante.company_id == company_id
    ).first()


def find_by_documento(db: Session, company_id: int, tipo_documento: str, serie: str, numero: str) -> Optional[Comprobante]:
    """Busca por la clave única (empresa, tipo, serie, número)"""
    return db.query(Comprobante).filter(
        Comprobante.company_id == company_id,
        Comprobante.tipo_documento == tipo_documento,
        Comprobante.serie == serie,
        Comprobante.numero == numero,
    ).first()


# -----------------------------------------------------
# Listado paginado con filtros
# -----------------------------------------------------
def list_comprobantes(
    db: Session,
    company_id: int,
    skip: int = 0,
    limit: int = 50,
    periodo: Optional[str] = None,
    tipo: Optional[str] = None,
    estado: Optional[str] = None,
) -> Tuple[List[Comprobante], int]:
    query = db.query(Comprobante).filter(Comprobante.company_id == company_id)
    if periodo:
        query = query.filter(Comprobante.periodo == periodo)
    if tipo:
        query = query.filter(Comprobante.tipo == tipo)
    if estado:
        query = query.filter(Comprobante.estado == estado)

    total = query.count()
    items = (
        query.order_by(Comprobante.fecha_emision.desc(), Comprobante.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return items, total


def list_periodos(db: Session, company_id: int) -> List[str]:
    rows = (
        db.query(Comprobante.periodo)
        .filter(Comprobante.company_id == company_id)
        .distinct()
        .order_by(Comprobante.periodo.desc())
        .all()
    )
    return [r[0] for r in rows]


def list_activos_periodo(db: Session, company_id: int, periodo: str) -> List[Comprobante]:
    return db.query(Comprobante).filter(
        Comprobante.company_id == company_id,
        Comprobante.periodo == periodo,
        Comprobante.estado == EstadoComprobante.ACTIVO,
    ).all()


# -----------------------------------------------------
# Anulación (soft delete)
# -----------------------------------------------------
def anular_comprobante(db: Session, comprobante: Comprobante) -> Comprobante:
    comprobante.estado = EstadoComprobante.ANULADO
    db.commit()
    db.refresh(comprobante)
    return comprobante
