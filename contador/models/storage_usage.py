from sqlalchemy import Column, BigInteger, DateTime, ForeignKey
from sqlalchemy.sql import func
from contador.db.base import Base
from contador.models.types import PK


class StorageUsage(Base):
    """Uso de almacenamiento por empresa, en bytes"""
    __tablename__ = "storage_usage"

    id = Column(PK, primary_key=True, autoincrement=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, unique=True)
    logos_size = Column(BigInteger, nullable=False, default=0)
    certificates_size = Column(BigInteger, nullable=False, default=0)
    generated_files_size = Column(BigInteger, nullable=False, default=0)
    total_size = Column(BigInteger, nullable=False, default=0)
    max_storage = Column(BigInteger, nullable=False, comment="Límite en bytes")
    last_calculated = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
