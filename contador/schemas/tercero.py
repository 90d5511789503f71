# contador/schemas/tercero.py
from pydantic import BaseModel
from typing import Optional


class TerceroResponse(BaseModel):
    tipo_documento: str
    numero_documento: str
    razon_social: str
    nombre_comercial: Optional[str] = None
    direccion: Optional[str] = None
    ubigeo: Optional[str] = None
    departamento: Optional[str] = None
    provincia: Optional[str] = None
    distrito: Optional[str] = None
    estado: Optional[str] = None
    condicion: Optional[str] = None
    es_agente_retencion: bool = False
    es_buen_contribuyente: bool = False
    fuente: str
