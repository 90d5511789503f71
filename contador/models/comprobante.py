# contador/models/comprobante.py
"""
Comprobantes electrónicos importados (facturas, boletas, notas) y sus líneas.

Un comprobante es único por (empresa, tipo de documento, serie, número).
La eliminación es lógica: estado pasa a ANULADO.
"""
from sqlalchemy import (
    Column, String, Boolean, Date, DateTime, Numeric, Integer, ForeignKey, Text,
    UniqueConstraint, Index
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class TipoOperacion:
    VENTA = "VENTA"
    COMPRA = "COMPRA"


class EstadoComprobante:
    ACTIVO = "ACTIVO"
    ANULADO = "ANULADO"


class Comprobante(Base):
    __tablename__ = "comprobantes"
    __table_args__ = (
        UniqueConstraint("company_id", "tipo_documento", "serie", "numero", name="uq_comprobante_documento"),
        Index("ix_comprobantes_company_periodo", "company_id", "periodo"),
    )

    # ============================================================================
    # IDENTIFICACIÓN
    # ============================================================================
    id = Column(PK, primary_key=True, autoincrement=True)
    company_id = Column(PK, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    tipo = Column(String(10), nullable=False, comment="VENTA o COMPRA desde el punto de vista de la empresa")
    tipo_documento = Column(String(2), nullable=False, comment="Catálogo 01: 01 factura, 03 boleta, 07 NC, 08 ND")
    serie = Column(String(10), nullable=False)
    numero = Column(String(20), nullable=False)
    fecha_emision = Column(Date, nullable=False)
    fecha_vencimiento = Column(Date, nullable=True)
    periodo = Column(String(6), nullable=False, comment="Período tributario YYYYMM")

    # ============================================================================
    # PARTES
    # ============================================================================
    ruc_emisor = Column(String(11), nullable=False)
    razon_social_emisor = Column(String(255), nullable=True)
    direccion_emisor = Column(String(500), nullable=True)
    tipo_doc_receptor = Column(String(2), nullable=True)
    numero_doc_receptor = Column(String(20), nullable=True)
    razon_social_receptor = Column(String(255), nullable=True)
    # Contraparte de la empresa: cliente en ventas, proveedor en compras
    tipo_doc_tercero = Column(String(2), nullable=True)
    ruc_tercero = Column(String(20), nullable=True, index=True)
    razon_social_tercero = Column(String(255), nullable=True)

    # ============================================================================
    # MONTOS
    # ============================================================================
    moneda = Column(String(3), nullable=False, default="PEN")
    base_imponible = Column(Numeric(14, 2), nullable=False, default=0)
    igv = Column(Numeric(14, 2), nullable=False, default=0)
    total = Column(Numeric(14, 2), nullable=False, default=0)
    es_gravada = Column(Boolean, nullable=False, default=False)
    afecta_igv = Column(Boolean, nullable=False, default=False)
    es_exportacion = Column(Boolean, nullable=False, default=False)

    # ============================================================================
    # OTROS
    # ============================================================================
    observaciones = Column(Text, nullable=True)
    hash_resumen = Column(String(255), nullable=True, comment="DigestValue de la firma del XML")
    xml_firmado = Column(Text, nullable=True, comment="XML firmado de comprobantes emitidos")
    cdr_base64 = Column(Text, nullable=True, comment="Constancia de recepción SUNAT")
    estado = Column(String(10), nullable=False, default=EstadoComprobante.ACTIVO)
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    company = relationship("Company", back_populates="comprobantes")
    items = relationship(
        "ComprobanteItem",
        back_populates="comprobante",
        cascade="all, delete-orphan",
        order_by="ComprobanteItem.numero_linea",
        lazy="selectin",
    )


class ComprobanteItem(Base):
    """Línea del comprobante tal como viene en el XML"""
    __tablename__ = "comprobante_items"

    id = Column(PK, primary_key=True, autoincrement=True)
    comprobante_id = Column(
        PK,
        ForeignKey("comprobantes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="FK al comprobante padre"
    )
    numero_linea = Column(Integer, nullable=False, comment="Posición de la línea, desde 1")
    cantidad = Column(Numeric(14, 4), nullable=False, default=1)
    unidad_medida = Column(String(10), nullable=False, default="NIU", comment="Catálogo 03 (NIU, ZZ, KGM...)")
    descripcion = Column(String(1000), nullable=False)
    codigo_producto = Column(String(100), nullable=True)
    precio_unitario = Column(Numeric(14, 4), nullable=False, default=0)
    valor_venta = Column(Numeric(14, 2), nullable=False, default=0)
    igv = Column(Numeric(14, 2), nullable=False, default=0)
    total = Column(Numeric(14, 2), nullable=False, default=0)

    comprobante = relationship("Comprobante", back_populates="items")
