from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from contador.db.base import Base
from contador.models.types import PK


class Tercero(Base):
    """
    Cache de consultas RUC/DNI a servicios externos.

    Un registro con menos de RUC_CACHE_DAYS días de antigüedad se devuelve
    sin consultar las APIs.
    """
    __tablename__ = "terceros"

    id = Column(PK, primary_key=True, autoincrement=True)
    tipo_documento = Column(String(2), nullable=False, comment="Catálogo 06: 6 RUC, 1 DNI")
    numero_documento = Column(String(15), nullable=False, unique=True)
    razon_social = Column(String(255), nullable=False)
    nombre_comercial = Column(String(255), nullable=True)
    direccion = Column(String(500), nullable=True)
    ubigeo = Column(String(6), nullable=True)
    departamento = Column(String(100), nullable=True)
    provincia = Column(String(100), nullable=True)
    distrito = Column(String(100), nullable=True)
    estado = Column(String(50), nullable=True, comment="ACTIVO, BAJA DE OFICIO...")
    condicion = Column(String(50), nullable=True, comment="HABIDO, NO HABIDO...")
    es_agente_retencion = Column(Boolean, nullable=False, default=False)
    es_buen_contribuyente = Column(Boolean, nullable=False, default=False)
    fuente = Column(String(50), nullable=True, comment="Servicio que respondió la consulta")
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    actualizado_en = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
