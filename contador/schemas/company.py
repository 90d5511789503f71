# contador/schemas/company.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CompanyBase(BaseModel):
    ruc: str = Field(..., min_length=11, max_length=11, description="RUC de 11 dígitos")
    razon_social: str = Field(..., min_length=1, max_length=255)
    nombre_comercial: Optional[str] = None
    direccion: Optional[str] = None
    regimen: Optional[str] = Field(None, description="RG, MYPE, RER, NRUS")


class CompanyCreate(CompanyBase):
    logo_base64: Optional[str] = None
    certificado_digital: Optional[str] = None
    firma_digital_base64: Optional[str] = None
    huella_digital_base64: Optional[str] = None


class CompanyResponse(CompanyBase):
    id: int
    owner_id: int
    activo: bool
    creado_en: Optional[datetime] = None

    class Config:
        from_attributes = True
