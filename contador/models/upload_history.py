from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from contador.db.base import Base
from contador.models.types import PK


class UploadStatus:
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class UploadHistory(Base):
    """Historial de archivos XML/ZIP importados"""
    __tablename__ = "upload_history"

    id = Column(PK, primary_key=True, autoincrement=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    usuario_id = Column(PK, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(10), nullable=False, comment="xml o zip")
    file_size = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=UploadStatus.PROCESSING)
    total = Column(Integer, nullable=False, default=0)
    imported = Column(Integer, nullable=False, default=0)
    duplicated = Column(Integer, nullable=False, default=0)
    errors = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True, comment="Primeros 3 errores separados por '; '")
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=True)
