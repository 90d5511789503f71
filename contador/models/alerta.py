# contador/models/alerta.py
"""
Alertas de licitaciones públicas (SEACE y otros portales).

- AlertConfig: filtros del usuario y días de anticipación
- ScrapedLicitacion / LicitacionEtapa: procesos recogidos por los scrapers
- LicitacionNotificacion: evita notificar dos veces lo mismo
- AlertHistory: bandeja de alertas del usuario
"""
from sqlalchemy import Column, String, Boolean, Date, DateTime, Numeric, ForeignKey, Text, JSON, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class AlertConfig(Base):
    __tablename__ = "alert_configs"

    id = Column(PK, primary_key=True, autoincrement=True)
    usuario_id = Column(PK, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre = Column(String(150), nullable=True)
    tipo = Column(String(30), nullable=False, default="licitacion")
    is_active = Column(Boolean, server_default=text("1"), nullable=False)
    regiones = Column(JSON, nullable=False, default=list, comment="Lista de regiones; vacía = todas")
    entidades = Column(JSON, nullable=False, default=list, comment="Subcadenas de entidad o sigla")
    palabras_clave = Column(JSON, nullable=False, default=list)
    monto_minimo = Column(Numeric(16, 2), nullable=True)
    monto_maximo = Column(Numeric(16, 2), nullable=True)
    dias_anticipacion = Column(JSON, nullable=False, default=lambda: [7, 3, 1, 0], comment="Días antes del vencimiento en que se avisa")
    email_destino = Column(String(255), nullable=True, comment="Si está vacío se usa el email del usuario")
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    usuario = relationship("Usuario", back_populates="alert_configs", lazy="joined")
    historial = relationship("AlertHistory", back_populates="alert_config", cascade="all, delete-orphan", lazy="dynamic")


class ScrapedLicitacion(Base):
    __tablename__ = "scraped_licitaciones"

    id = Column(PK, primary_key=True, autoincrement=True)
    nomenclatura = Column(String(255), nullable=False, index=True)
    objeto_contratacion = Column(Text, nullable=False)
    entidad = Column(String(255), nullable=False)
    sigla_entidad = Column(String(50), nullable=True)
    region = Column(String(100), nullable=True)
    valor_referencial = Column(Numeric(16, 2), nullable=True)
    moneda = Column(String(3), nullable=True, default="PEN")
    estado = Column(String(20), nullable=False, default="ACTIVO")
    fuente = Column(String(50), nullable=False, default="SEACE")
    url_origen = Column(String(1000), nullable=True)
    scraped_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

    etapas = relationship(
        "LicitacionEtapa",
        back_populates="licitacion",
        cascade="all, delete-orphan",
        order_by="LicitacionEtapa.fecha_fin",
        lazy="selectin",
    )
    notificaciones = relationship(
        "LicitacionNotificacion", back_populates="licitacion", cascade="all, delete-orphan", lazy="selectin"
    )


class LicitacionEtapa(Base):
    """Etapa del cronograma (convocatoria, consultas, propuestas, buena pro...)"""
    __tablename__ = "licitacion_etapas"

    id = Column(PK, primary_key=True, autoincrement=True)
    licitacion_id = Column(PK, ForeignKey("scraped_licitaciones.id", ondelete="CASCADE"), nullable=False, index=True)
    nombre_etapa = Column(String(255), nullable=False)
    fecha_inicio = Column(Date, nullable=True)
    fecha_fin = Column(Date, nullable=True, index=True)

    licitacion = relationship("ScrapedLicitacion", back_populates="etapas")


class LicitacionNotificacion(Base):
    __tablename__ = "licitacion_notificaciones"

    id = Column(PK, primary_key=True, autoincrement=True)
    licitacion_id = Column(PK, ForeignKey("scraped_licitaciones.id", ondelete="CASCADE"), nullable=False, index=True)
    alert_config_id = Column(PK, ForeignKey("alert_configs.id", ondelete="CASCADE"), nullable=False, index=True)
    tipo_notificacion = Column(String(30), nullable=False, comment="'nueva' o 'vencimiento_{n}d'")
    etapa_notificada = Column(String(255), nullable=True)
    enviado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    licitacion = relationship("ScrapedLicitacion", back_populates="notificaciones")


class AlertHistory(Base):
    __tablename__ = "alert_history"

    id = Column(PK, primary_key=True, autoincrement=True)
    alert_config_id = Column(PK, ForeignKey("alert_configs.id", ondelete="CASCADE"), nullable=False, index=True)
    titulo = Column(String(500), nullable=False)
    contenido = Column(Text, nullable=True)
    fuente = Column(String(50), nullable=True)
    entidad = Column(String(255), nullable=True)
    region = Column(String(100), nullable=True)
    monto = Column(Numeric(16, 2), nullable=True)
    url_origen = Column(String(1000), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_notified = Column(Boolean, nullable=False, default=False)
    notified_at = Column(DateTime(timezone=True), nullable=True)
    creado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    alert_config = relationship("AlertConfig", back_populates="historial")
