# contador/models/company.py
"""
Empresas (contribuyentes) y sus miembros.

Un usuario accede a una empresa si es miembro de ella. El creador queda
registrado como miembro con rol OWNER.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class MemberRole:
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    CONTADOR = "CONTADOR"
    VIEWER = "VIEWER"


class Company(Base):
    __tablename__ = "companies"

    id = Column(PK, primary_key=True, autoincrement=True)
    ruc = Column(String(11), nullable=False, unique=True, comment="RUC de la empresa (11 dígitos)")
    razon_social = Column(String(255), nullable=False)
    nombre_comercial = Column(String(255), nullable=True)
    direccion = Column(String(500), nullable=True)
    regimen = Column(String(50), nullable=True, comment="RG, MYPE, RER, NRUS")

    logo_base64 = Column(Text, nullable=True, comment="Logo en data URL base64")
    certificado_digital = Column(Text, nullable=True, comment="Certificado .pfx en base64")
    firma_digital_base64 = Column(Text, nullable=True, comment="Imagen de firma para actas")
    huella_digital_base64 = Column(Text, nullable=True, comment="Imagen de huella para actas")

    owner_id = Column(PK, ForeignKey("usuarios.id", ondelete="RESTRICT"), nullable=False, index=True)
    activo = Column(Boolean, server_default=text("1"), nullable=False)
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relaciones
    owner = relationship("Usuario", lazy="joined")
    members = relationship("CompanyMember", back_populates="company", cascade="all, delete-orphan", lazy="selectin")
    comprobantes = relationship("Comprobante", back_populates="company", lazy="dynamic")


class CompanyMember(Base):
    __tablename__ = "company_members"
    __table_args__ = (
        UniqueConstraint("company_id", "usuario_id", name="uq_company_member"),
    )

    id = Column(PK, primary_key=True, autoincrement=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    usuario_id = Column(PK, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    rol = Column(String(20), nullable=False, default=MemberRole.CONTADOR, comment="OWNER, ADMIN, CONTADOR, VIEWER")
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    company = relationship("Company", back_populates="members")
    usuario = relationship("Usuario", back_populates="empresas", lazy="joined")
