from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from contador.db.base import Base
from contador.models.types import PK


class AIUsageLog(Base):
    """Registro de cada llamada al proveedor de IA"""
    __tablename__ = "ai_usage_logs"

    id = Column(PK, primary_key=True, autoincrement=True)
    usuario_id = Column(PK, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    provider = Column(String(20), nullable=False)
    model = Column(String(100), nullable=False)
    prompt_type = Column(String(50), nullable=False, default="general")
    input_tokens = Column(Integer, nullable=False, default=0)
    output_tokens = Column(Integer, nullable=False, default=0)
    total_tokens = Column(Integer, nullable=False, default=0)
    response_time_ms = Column(Integer, nullable=False, default=0)
    success = Column(Boolean, nullable=False, default=True)
    error_message = Column(Text, nullable=True)
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
