# contador/models/inventario.py
"""
Inventarios físicos cruzados contra el kárdex (Anexo 2).

Por cada bien: diferencia = inventario_unidad - kardex_unidad.
Diferencia positiva es sobrante, negativa es faltante.
"""
from sqlalchemy import Column, String, Integer, Date, DateTime, Numeric, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class Inventario(Base):
    __tablename__ = "inventarios"

    id = Column(PK, primary_key=True, autoincrement=True)
    usuario_id = Column(PK, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(Text, nullable=True)
    fecha_inventario = Column(Date, nullable=False)
    codigo_economato = Column(String(20), nullable=False, default="130", comment="Código de almacén")
    almacen_desc = Column(String(255), nullable=True)

    total_items = Column(Integer, nullable=False, default=0)
    total_inventario_importe = Column(Numeric(16, 2), nullable=False, default=0)
    total_kardex_importe = Column(Numeric(16, 2), nullable=False, default=0)
    total_sobrantes_importe = Column(Numeric(16, 2), nullable=False, default=0)
    total_faltantes_importe = Column(Numeric(16, 2), nullable=False, default=0)
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    company = relationship("Company", lazy="joined")
    items = relationship(
        "InventarioItem",
        back_populates="inventario",
        cascade="all, delete-orphan",
        order_by="InventarioItem.codigo_bien",
        lazy="selectin",
    )


class InventarioItem(Base):
    __tablename__ = "inventario_items"

    id = Column(PK, primary_key=True, autoincrement=True)
    inventario_id = Column(PK, ForeignKey("inventarios.id", ondelete="CASCADE"), nullable=False, index=True)
    codigo_bien = Column(String(50), nullable=False)
    descripcion = Column(String(500), nullable=False, default="")
    unidad_medida = Column(String(50), nullable=True)

    inventario_unidad = Column(Numeric(16, 4), nullable=False, default=0, comment="Conteo físico")
    inventario_importe = Column(Numeric(16, 2), nullable=False, default=0)
    kardex_unidad = Column(Numeric(16, 4), nullable=False, default=0, comment="Saldo según kárdex")
    kardex_importe = Column(Numeric(16, 2), nullable=False, default=0)
    costo_unitario = Column(Numeric(16, 4), nullable=False, default=0)
    sobrantes_unidad = Column(Numeric(16, 4), nullable=False, default=0)
    sobrantes_importe = Column(Numeric(16, 2), nullable=False, default=0)
    faltantes_unidad = Column(Numeric(16, 4), nullable=False, default=0)
    faltantes_importe = Column(Numeric(16, 2), nullable=False, default=0)

    inventario = relationship("Inventario", back_populates="items")
