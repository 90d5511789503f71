from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class Usuario(Base):
    __tablename__ = "usuarios"

    id = Column(PK, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)  # login
    nombre = Column(String(150))
    telefono = Column(String(50))
    activo = Column(Boolean, server_default=text("1"), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    role_id = Column(PK, ForeignKey("roles.id", onupdate="CASCADE", ondelete="RESTRICT"), nullable=False)
    hashed_password = Column(String(255), nullable=True)

    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relaciones
    role = relationship("Role", back_populates="usuarios", lazy="joined")
    empresas = relationship("CompanyMember", back_populates="usuario", lazy="select")
    alert_configs = relationship("AlertConfig", back_populates="usuario", lazy="select")
