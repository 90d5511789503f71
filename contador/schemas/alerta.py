# contador/schemas/alerta.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class AlertConfigBase(BaseModel):
    nombre: Optional[str] = None
    tipo: str = "licitacion"
    is_active: bool = True
    regiones: List[str] = []
    entidades: List[str] = []
    palabras_clave: List[str] = []
    monto_minimo: Optional[Decimal] = Field(None, ge=0)
    monto_maximo: Optional[Decimal] = Field(None, ge=0)
    dias_anticipacion: List[int] = [7, 3, 1, 0]
    email_destino: Optional[EmailStr] = None


class AlertConfigCreate(AlertConfigBase):
    pass


class AlertConfigUpdate(BaseModel):
    nombre: Optional[str] = None
    is_active: Optional[bool] = None
    regiones: Optional[List[str]] = None
    entidades: Optional[List[str]] = None
    palabras_clave: Optional[List[str]] = None
    monto_minimo: Optional[Decimal] = None
    monto_maximo: Optional[Decimal] = None
    dias_anticipacion: Optional[List[int]] = None
    email_destino: Optional[EmailStr] = None


class AlertConfigResponse(AlertConfigBase):
    id: int
    usuario_id: int
    email_destino: Optional[str] = None
    creado_en: Optional[datetime] = None

    @field_validator("dias_anticipacion", mode="before")
    @classmethod
    def _dias_como_lista(cls, v):
        # Configs antiguas guardaban un entero
        if isinstance(v, int):
            return [v]
        return v if v is not None else []

    class Config:
        from_attributes = True


class AlertHistoryResponse(BaseModel):
    id: int
    alert_config_id: int
    titulo: str
    contenido: Optional[str] = None
    fuente: Optional[str] = None
    entidad: Optional[str] = None
    region: Optional[str] = None
    monto: Optional[Decimal] = None
    url_origen: Optional[str] = None
    is_read: bool
    is_notified: bool
    notified_at: Optional[datetime] = None
    creado_en: Optional[datetime] = None

    class Config:
        from_attributes = True
